"""Pattern based pre-flight screen for user input.

Hides which patterns are refused and how they are matched. Rules are
evaluated in declaration order and the first match wins, so configuration
order is significant.
"""

import logging
import re
from collections.abc import Iterable

from .models import ValidationResult, ValidationRule

logger = logging.getLogger(__name__)

PII_MESSAGE = "Your input contains Personal Identifiable Information: {name}. Please try again!"


class InputValidator:
    """Ordered list of validation rules compiled once at construction."""

    def __init__(self, rules: Iterable[ValidationRule]):
        """Initialize validator.

        Args:
            rules: Validation rules in evaluation order

        Raises:
            ValueError: If a rule pattern is not a valid regular expression
        """
        self._rules = list(rules)
        self._compiled: list[tuple[ValidationRule, re.Pattern[str]]] = []
        for rule in self._rules:
            try:
                self._compiled.append((rule, re.compile(rule.pattern)))
            except re.error as e:
                raise ValueError(f"Invalid pattern for validation '{rule.name}': {e}") from e

    @property
    def rules(self) -> list[ValidationRule]:
        """Rules in evaluation order."""
        return list(self._rules)

    def validate(self, text: str) -> ValidationResult:
        """Check text against the rules.

        Returns:
            ValidationResult with valid=False and a message naming the first
            matching rule, or valid=True with an empty message
        """
        logger.debug("Found %d validation rules", len(self._compiled))

        for rule, regex in self._compiled:
            if regex.search(text):
                logger.info("Validation matched: %s", rule.name)
                return ValidationResult(valid=False, message=PII_MESSAGE.format(name=rule.name))

        return ValidationResult(valid=True)
