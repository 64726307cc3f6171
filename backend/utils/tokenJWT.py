# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from config import settings

ROLE_ADMIN = "ADMIN"
ROLE_CLIENT = "CLIENT"

# Authorization scheme
bearer_scheme = HTTPBearer()


class CurrentUser(BaseModel):
    sub: str
    role: str
    name: Optional[str] = None
    client_id: Optional[str] = None


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Retrieve the logged-in admin or client from the JWT token
def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> CurrentUser:
    token = credentials.credentials
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        sub: str = payload.get("sub")
        # Ensure subject is present in the token payload
        if sub is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    return CurrentUser(
        sub=sub,
        role=payload.get("role") or ROLE_CLIENT,
        name=payload.get("name"),
        client_id=payload.get("client_id"),
    )


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: CurrentUser = Depends(get_current_user)):
        if allowed_roles and current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return _checker
