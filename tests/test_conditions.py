import pytest

from httpretry.conditions import (
    Classification,
    Verdict,
    accept,
    default_5xx_classifier,
    legacy_conditioner,
    permanent,
    retry,
    status_classifier,
)
from httpretry.errors import ResponseRejected


class DummyResponse:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code


def test_accept_has_no_error():
    result = accept()

    assert result.verdict is Verdict.ACCEPT
    assert result.error is None
    assert result.accepted


def test_retry_and_permanent_format_messages():
    retried = retry("bad status code %d", 503)
    failed = permanent("gone")

    assert retried.should_retry
    assert isinstance(retried.error, ResponseRejected)
    assert str(retried.error) == "bad status code 503"
    assert failed.verdict is Verdict.PERMANENT
    assert str(failed.error) == "gone"


def test_message_without_args_is_not_formatted():
    assert str(retry("100% broken").error) == "100% broken"


def test_invalid_states_rejected():
    with pytest.raises(ValueError):
        Classification(Verdict.ACCEPT, ResponseRejected("nope"))
    with pytest.raises(ValueError):
        Classification(Verdict.RETRY)
    with pytest.raises(ValueError):
        Classification(Verdict.PERMANENT)


def test_from_pair():
    error = ResponseRejected("bad")

    assert Classification.from_pair(False, None) == accept()
    assert Classification.from_pair(True, error) == Classification(Verdict.RETRY, error)
    assert Classification.from_pair(False, error) == Classification(Verdict.PERMANENT, error)
    with pytest.raises(ValueError):
        Classification.from_pair(True, None)


def test_as_pair():
    assert retry("bad").as_pair() == (True, ResponseRejected("bad"))
    assert accept().as_pair() == (False, None)


def test_legacy_conditioner():
    def conditioner(response):
        if response.status_code == 500:
            return True, ResponseRejected("bad")
        return False, None

    classify = legacy_conditioner(conditioner)

    assert classify(DummyResponse(500)).should_retry
    assert classify(DummyResponse(200)).accepted
    assert classify.__name__ == "conditioner"


@pytest.mark.parametrize(
    "status, verdict",
    [
        (200, Verdict.ACCEPT),
        (204, Verdict.ACCEPT),
        (500, Verdict.RETRY),
        (599, Verdict.RETRY),
        (301, Verdict.PERMANENT),
        (404, Verdict.PERMANENT),
        (429, Verdict.PERMANENT),
    ],
)
def test_default_5xx_classifier(status, verdict):
    assert default_5xx_classifier(DummyResponse(status)).verdict is verdict


def test_default_classifier_is_pure():
    response = DummyResponse(503)

    assert default_5xx_classifier(response) == default_5xx_classifier(response)
    assert str(default_5xx_classifier(response).error) == "bad status code 503"


def test_status_classifier():
    classify = status_classifier({429, 503})

    assert classify(DummyResponse(429)).should_retry
    assert classify(DummyResponse(201)).accepted
    assert classify(DummyResponse(500)).verdict is Verdict.PERMANENT
