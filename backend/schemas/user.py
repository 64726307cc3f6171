# backend/schemas/user.py
from pydantic import BaseModel
from typing import Optional

# Credentials: the admin account from settings or a client's username/password
class UserLogin(BaseModel):
    username: str
    password: str

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    name: Optional[str] = None
    client_id: Optional[str] = None
