# backend/routes/clients.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from models.tenant import Tenant
from schemas import client as schemas
from store import get_directory
from utils.tenants import TenantDirectory
from utils.tokenJWT import ROLE_ADMIN, CurrentUser, get_current_user, role_required

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("")
def list_clients(
    directory: TenantDirectory = Depends(get_directory),
    current_user: CurrentUser = Depends(role_required(ROLE_ADMIN)),
):
    tenants: List[Tenant] = directory.list_tenants()
    return {"data": [schemas.ClientOut.model_validate(t).model_dump(mode="json", by_alias=True) for t in tenants]}


# Register a new client in the master sheet (creates the Clients tab if needed)
@router.post("", status_code=status.HTTP_201_CREATED)
def add_client(
    payload: schemas.ClientCreate,
    directory: TenantDirectory = Depends(get_directory),
    current_user: CurrentUser = Depends(role_required(ROLE_ADMIN)),
):
    tenant = directory.add_tenant(Tenant(
        id="",
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        logo_url=payload.logo_url,
        sheet_id=payload.sheet_id,
        username=payload.username,
        password=payload.password,
    ))
    logger.info(f"Client {tenant.id} created by {current_user.sub}")
    return {
        "success": True,
        "message": "Client added successfully",
        "client": schemas.ClientCreated.model_validate(tenant).model_dump(mode="json", by_alias=True),
    }


# A client may only read itself; the admin may read anyone
@router.get("/{client_id}", response_model=schemas.ClientOut)
def get_client(
    client_id: str,
    directory: TenantDirectory = Depends(get_directory),
    current_user: CurrentUser = Depends(get_current_user),
):
    if current_user.role != ROLE_ADMIN and current_user.client_id != client_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    tenant = directory.find_tenant(client_id)
    if tenant is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return tenant
