# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from config import settings
from schemas import user as schemas
from store import get_directory
from utils.tenants import CLIENT_COOKIE, TenantDirectory
from utils.tokenJWT import ROLE_ADMIN, ROLE_CLIENT, CurrentUser, create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


# Authenticate the admin (settings) or a client (master sheet) and issue a JWT
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, response: Response, directory: TenantDirectory = Depends(get_directory)):
    if payload.username == settings.ADMIN_USERNAME and payload.password == settings.ADMIN_PASSWORD:
        access_token = create_access_token(data={"sub": payload.username, "role": ROLE_ADMIN, "name": payload.username})
        # Admin picks a client explicitly; drop any stale selection
        response.delete_cookie(CLIENT_COOKIE)
        logger.info("Admin logged in")
        return {"access_token": access_token, "role": ROLE_ADMIN, "name": payload.username}

    tenant = directory.authenticate(payload.username, payload.password)
    if tenant is None:
        logger.info(f"Failed login attempt for {payload.username}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(
        data={"sub": tenant.username, "role": ROLE_CLIENT, "name": tenant.name, "client_id": tenant.id}
    )
    response.set_cookie(CLIENT_COOKIE, tenant.id, samesite="lax")
    logger.info(f"Client {tenant.id} ({tenant.name}) logged in")
    return {"access_token": access_token, "role": ROLE_CLIENT, "name": tenant.name, "client_id": tenant.id}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(CLIENT_COOKIE)
    return {"success": True}


# Retrieve current authenticated user details
@router.get("/me", response_model=CurrentUser)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user
