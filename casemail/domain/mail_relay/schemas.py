"""Mail relay schemas - Pydantic models for validation"""

from typing import Union

from pydantic import BaseModel, EmailStr, Field, field_validator


class SendEmailRequest(BaseModel):
    """One outbound message sent with a user's stored SMTP settings"""

    userId: str = Field(min_length=1)
    to: list[EmailStr] = Field(min_length=1)
    subject: str
    body: str

    @field_validator("to", mode="before")
    @classmethod
    def single_recipient_to_list(cls, v: Union[str, list]) -> list:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("subject")
    @classmethod
    def no_line_breaks_in_subject(cls, v: str) -> str:
        # A CR/LF in a header would inject extra headers (e.g. Bcc)
        if "\r" in v or "\n" in v:
            raise ValueError("subject must not contain line breaks")
        return v


class SendEmailResponse(BaseModel):
    message: str
