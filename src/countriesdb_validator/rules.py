"""
Validation rules - plug the validator into pydantic models.

Rules are callables usable with ``AfterValidator`` or ``field_validator``.
They resolve credentials from settings, read related fields from the data
already validated on the model, and raise ValueError on failure.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationInfo

from countriesdb_validator.client import Validator
from countriesdb_validator.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RuleOutcome:
    """Result of evaluating a rule against one field."""

    passed: bool
    message: str | None = None


class ValidationRule(ABC):
    """
    Base class for CountriesDB-backed field rules.

    Subclasses implement ``check``; the base class owns client creation
    and the fail-closed policy when no private key is configured.
    """

    def __init__(self, validator: Validator | None = None):
        self._validator = validator

    @property
    @abstractmethod
    def message(self) -> str:
        """Default failure message; ``{attribute}`` is replaced by the field name."""
        ...

    @abstractmethod
    def check(self, validator: Validator, value: Any, context: Mapping[str, Any]) -> RuleOutcome:
        """Run the rule with a ready validator."""
        ...

    def evaluate(self, value: Any, context: Mapping[str, Any] | None = None) -> RuleOutcome:
        """
        Evaluate the rule for a field value.

        Args:
            value: The field value
            context: The other fields of the object being validated

        Returns:
            RuleOutcome; fails without a network call when unconfigured
        """
        validator = self._get_validator()
        if validator is None:
            return RuleOutcome(passed=False)
        return self.check(validator, value, context or {})

    def format_message(self, attribute: str, outcome: RuleOutcome | None = None) -> str:
        """Failure text for a field, preferring the server's message."""
        if outcome and outcome.message:
            return outcome.message
        return self.message.format(attribute=attribute)

    def __call__(self, value: Any, info: ValidationInfo) -> Any:
        """Pydantic after-validator entry point."""
        outcome = self.evaluate(value, info.data)
        if not outcome.passed:
            raise ValueError(self.format_message(info.field_name or "value", outcome))
        return value

    def _get_validator(self) -> Validator | None:
        if self._validator is None:
            settings = get_settings()
            if not settings.is_configured:
                logger.warning("CountriesDB private key not configured; failing validation")
                return None
            self._validator = Validator(
                settings.private_key,
                settings.api_url,
                timeout=settings.timeout,
            )
        return self._validator


class ValidCountry(ValidationRule):
    """The field must hold a valid country code."""

    def __init__(self, follow_upward: bool = False, validator: Validator | None = None):
        super().__init__(validator)
        self.follow_upward = follow_upward

    @property
    def message(self) -> str:
        return "The {attribute} must be a valid country code."

    def check(self, validator: Validator, value: Any, context: Mapping[str, Any]) -> RuleOutcome:
        result = validator.validate_country(value, self.follow_upward)
        return RuleOutcome(passed=result.valid, message=result.message)


class ValidSubdivision(ValidationRule):
    """The field must hold a subdivision code of the country in a sibling field."""

    def __init__(
        self,
        country_attribute: str = "country",
        follow_related: bool = False,
        allow_parent_selection: bool = False,
        validator: Validator | None = None,
    ):
        super().__init__(validator)
        self.country_attribute = country_attribute
        self.follow_related = follow_related
        self.allow_parent_selection = allow_parent_selection

    @property
    def message(self) -> str:
        return "The {attribute} must be a valid subdivision code for the selected country."

    def check(self, validator: Validator, value: Any, context: Mapping[str, Any]) -> RuleOutcome:
        country = context.get(self.country_attribute)
        if not country:
            return RuleOutcome(passed=False)

        result = validator.validate_subdivision(
            value,
            country,
            self.follow_related,
            self.allow_parent_selection,
        )
        return RuleOutcome(passed=result.valid, message=result.message)
