from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Represents a chat message in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user' or 'assistant'")
    content: str = Field(description="Content of the message")


class Fingerprint(BaseModel):
    """The (persona, instruction) pair that produced the current remote context."""

    model_config = ConfigDict(frozen=True)

    persona: str = ""
    instruction: str = ""


class Answer(BaseModel):
    """Result of a single prompt.

    A rejected answer carries the validator's message and never reached
    the remote service.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Answer text or rejection message")
    rejected: bool = Field(default=False, description="True if the input was refused locally")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
