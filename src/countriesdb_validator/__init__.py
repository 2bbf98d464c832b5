"""CountriesDB validator - country and subdivision checks against the CountriesDB API."""

from countriesdb_validator.client import Validator
from countriesdb_validator.exceptions import (
    InvalidConfiguration,
    RequestError,
    ValidationFailure,
    ValidatorError,
)
from countriesdb_validator.models import CodeOutcome, ValidationOutcome

__all__ = [
    "CodeOutcome",
    "InvalidConfiguration",
    "RequestError",
    "ValidationFailure",
    "ValidationOutcome",
    "Validator",
    "ValidatorError",
]
