"""Runtime settings for statement ingestion.

Settings are a frozen, validated pydantic model. ``IngestSettings.from_env``
reads ``STATEMENT_INGEST_*`` variables (the CLI loads ``.env`` first via
python-dotenv); anything unset keeps its default.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .formats import BANK_FORMATS

_ENV_PREFIX = "STATEMENT_INGEST_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class IngestSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    # Reject the file when fewer than this share of rows is importable.
    min_valid_fraction: float = Field(default=0.2, ge=0.0, le=1.0)
    # Format used when detection finds no match; None makes that fatal.
    default_format: str | None = "creditcard"
    max_file_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    currency: str = Field(default="AUD", min_length=3, max_length=3)
    fingerprint_use_transaction_id: bool = False

    @field_validator("default_format")
    @classmethod
    def _known_format(cls, v: str | None) -> str | None:
        if v is None or not v.strip() or v.strip().lower() == "none":
            return None
        key = v.strip().lower()
        if key not in BANK_FORMATS:
            raise ValueError(f"unknown default_format {v!r}; known: {', '.join(BANK_FORMATS)}")
        return key

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> IngestSettings:
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = env.get(_ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if name == "fingerprint_use_transaction_id":
                v = raw.strip().lower()
                if v in _TRUE:
                    values[name] = True
                elif v in _FALSE:
                    values[name] = False
                else:
                    raise ValueError(f"{_ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
            elif name == "min_valid_fraction":
                values[name] = float(raw)
            elif name == "max_file_bytes":
                values[name] = int(raw)
            else:
                values[name] = raw
        return cls(**values)


__all__ = ["IngestSettings"]
