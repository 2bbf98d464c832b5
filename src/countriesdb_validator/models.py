"""Response contracts for the CountriesDB validation API.

Single-code calls answer with ``{valid, message?}``; batch calls wrap one
entry per submitted code in ``{results: [...]}``.
"""

from pydantic import BaseModel, ConfigDict

INVALID_COUNTRY_MESSAGE = "Invalid country code."


class ValidationOutcome(BaseModel):
    """Outcome of validating a single code."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    valid: bool
    message: str | None = None

    @classmethod
    def rejected(cls, message: str) -> "ValidationOutcome":
        """Build a failing outcome."""
        return cls(valid=False, message=message)


class CodeOutcome(BaseModel):
    """Outcome for one entry of a batch call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str | None = None
    valid: bool
    message: str | None = None


class BatchEnvelope(BaseModel):
    """Success envelope of a batch call."""

    model_config = ConfigDict(extra="ignore")

    results: list[CodeOutcome]
