"""Input validation module.

Screens user input against configured patterns before it leaves the machine.
"""

from .models import ValidationResult, ValidationRule
from .validator import PII_MESSAGE, InputValidator

__all__ = [
    "InputValidator",
    "PII_MESSAGE",
    "ValidationResult",
    "ValidationRule",
]
