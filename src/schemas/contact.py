"""Contact form schemas."""

from pydantic import BaseModel, Field


class ContactMessage(BaseModel):
    """Message relayed to the support mailbox."""

    subject: str | None = Field(None, max_length=255)
    message: str | None = Field(None, max_length=10000)
