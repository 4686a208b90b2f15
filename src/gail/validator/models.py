from pydantic import BaseModel, ConfigDict, Field


class ValidationRule(BaseModel):
    """A named pattern that must not appear in user input."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Human readable name shown when the rule matches")
    pattern: str = Field(description="Regular expression searched for in the input")


class ValidationResult(BaseModel):
    """Outcome of validating one input."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    message: str = ""
