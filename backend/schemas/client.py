# backend/schemas/client.py
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel


# Schema for adding a client to the master sheet
class ClientCreate(CamelModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = ""
    logo_url: str = ""
    sheet_id: str = ""
    # Generated from the name when left empty
    username: str = ""
    password: str = ""


# Client as returned to the UI (no password)
class ClientOut(CamelModel):
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    logo_url: str = ""
    sheet_id: str = ""
    username: str = ""


class ClientCreated(ClientOut):
    # Returned once, right after creation, so the admin can pass it on
    password: Optional[str] = None
