import pytest
from pydantic import ValidationError

from statement_ingest.config import IngestSettings


def test_defaults():
    s = IngestSettings()
    assert s.min_valid_fraction == 0.2
    assert s.default_format == "creditcard"
    assert s.max_file_bytes == 10 * 1024 * 1024
    assert s.currency == "AUD"
    assert s.fingerprint_use_transaction_id is False


def test_from_env_reads_prefixed_variables():
    s = IngestSettings.from_env(
        {
            "STATEMENT_INGEST_MIN_VALID_FRACTION": "0.5",
            "STATEMENT_INGEST_DEFAULT_FORMAT": "NAB",
            "STATEMENT_INGEST_MAX_FILE_BYTES": "2048",
            "STATEMENT_INGEST_CURRENCY": "usd",
            "STATEMENT_INGEST_FINGERPRINT_USE_TRANSACTION_ID": "yes",
            "UNRELATED": "x",
        }
    )
    assert s.min_valid_fraction == 0.5
    assert s.default_format == "nab"
    assert s.max_file_bytes == 2048
    assert s.currency == "USD"
    assert s.fingerprint_use_transaction_id is True


def test_default_format_can_be_disabled():
    assert IngestSettings.from_env({"STATEMENT_INGEST_DEFAULT_FORMAT": "none"}).default_format is None
    assert IngestSettings(default_format=None).default_format is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_valid_fraction": 1.5},
        {"default_format": "monzo"},
        {"max_file_bytes": 0},
        {"currency": "AU"},
        {"unknown_field": 1},
    ],
)
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValidationError):
        IngestSettings(**kwargs)


def test_invalid_boolean_env_value():
    with pytest.raises(ValueError):
        IngestSettings.from_env({"STATEMENT_INGEST_FINGERPRINT_USE_TRANSACTION_ID": "maybe"})


def test_settings_are_frozen():
    s = IngestSettings()
    with pytest.raises(ValidationError):
        s.currency = "USD"
