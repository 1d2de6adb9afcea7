import pytest

from httpretry.config import load_config


ENV_NAMES = [
    "HTTP_TIMEOUT",
    "RETRY_INITIAL_INTERVAL",
    "RETRY_MULTIPLIER",
    "RETRY_MAX_INTERVAL",
    "RETRY_JITTER",
    "RETRY_MAX_ELAPSED",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_EOF_MARKERS",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr("httpretry.config.load_dotenv", lambda: None)
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    config = load_config()

    assert config.http_timeout == 30
    assert config.retry_initial_interval == 0.5
    assert config.retry_multiplier == 1.5
    assert config.retry_max_interval == 60
    assert config.retry_max_elapsed == 900
    assert config.retry_max_attempts is None
    assert config.eof_markers == ["EOF", "Remote end closed connection"]
    assert config.log_level == "INFO"
    assert config.log_file is None


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("HTTP_TIMEOUT", "5")
    monkeypatch.setenv("RETRY_INITIAL_INTERVAL", "0.1")
    monkeypatch.setenv("RETRY_MULTIPLIER", "2")
    monkeypatch.setenv("RETRY_MAX_INTERVAL", "3")
    monkeypatch.setenv("RETRY_JITTER", "0")
    monkeypatch.setenv("RETRY_MAX_ELAPSED", "0")
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("RETRY_EOF_MARKERS", "EOF, stream closed ,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FILE", "logs/retry.log")

    config = load_config()
    policy = config.backoff_policy()

    assert config.http_timeout == 5
    assert config.retry_max_elapsed is None
    assert config.log_level == "DEBUG"
    assert config.log_file == "logs/retry.log"
    assert policy.initial_interval == 0.1
    assert policy.multiplier == 2
    assert policy.max_interval == 3
    assert policy.jitter == 0
    assert policy.max_elapsed_time is None
    assert policy.max_attempts == 4
    assert config.error_classifier().eof_markers == ("EOF", "stream closed")


def test_invalid_number_names_variable(monkeypatch):
    monkeypatch.setenv("RETRY_MULTIPLIER", "fast")

    with pytest.raises(ValueError, match="RETRY_MULTIPLIER"):
        load_config()


def test_invalid_attempts_names_variable(monkeypatch):
    monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "2.5")

    with pytest.raises(ValueError, match="RETRY_MAX_ATTEMPTS"):
        load_config()
