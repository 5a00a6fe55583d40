"""Email settings schemas - Pydantic models for validation"""

from pydantic import BaseModel, EmailStr, Field, field_validator


class EmailSettingsSave(BaseModel):
    """Schema for saving (upserting) a user's SMTP settings"""

    userId: str = Field(min_length=1)
    smtpServer: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)  # 587 for STARTTLS, 465 for SSL
    email: EmailStr
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    useSSL: bool = False

    @field_validator("userId", "smtpServer", "username")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EmailSettingsResponse(BaseModel):
    """Non-secret SMTP settings - never includes the password, encrypted or not"""

    smtpServer: str
    port: int
    email: str
    username: str
    useSSL: bool


class MessageResponse(BaseModel):
    message: str
