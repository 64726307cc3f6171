# backend/schemas/email.py
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel


# Manual trigger for one client's report
class ClientEmailRequest(CamelModel):
    client_email: str = Field(min_length=1)
    client_name: Optional[str] = None
    client_id: Optional[str] = None


class PasswordResetRequest(CamelModel):
    name: str = Field(min_length=1)
    contact_number: str = Field(min_length=1)
    company_name: str = Field(min_length=1)


class SupportRequest(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)
