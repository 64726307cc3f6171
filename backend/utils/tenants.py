# backend/utils/tenants.py
import logging
import re
import time
from typing import List, Optional

from models.tenant import CLIENT_HEADERS, Tenant, tenant_row
from utils.exceptions import ConfigurationError
from utils.record_mapper import map_tenants

logger = logging.getLogger(__name__)

CLIENTS_TAB = "Clients"
CLIENTS_RANGE = "Clients!A:H"
CLIENT_COOKIE = "clientId"

_COOKIE_RE_TEMPLATE = r"(?:^|;\s*){name}=([^;]+)"


class TenantDirectory:
    """Tenants listed in the Clients tab of the master spreadsheet.

    Every call re-reads the tab; nothing is cached.
    """

    def __init__(self, store, master_sheet_id: str):
        self.store = store
        self.master_sheet_id = master_sheet_id

    def _require_master(self) -> str:
        if not self.master_sheet_id:
            raise ConfigurationError("Master Sheet ID not found in environment variables")
        return self.master_sheet_id

    def list_tenants(self) -> List[Tenant]:
        sheet_id = self._require_master()
        grid = self.store.get_values(sheet_id, CLIENTS_RANGE)
        if len(grid) <= 1:
            return []
        return map_tenants(grid)

    def notifiable_tenants(self) -> List[Tenant]:
        return [t for t in self.list_tenants() if t.notifiable]

    def find_tenant(self, tenant_id: str) -> Optional[Tenant]:
        if not tenant_id:
            return None
        for tenant in self.list_tenants():
            if tenant.id == tenant_id:
                return tenant
        return None

    def authenticate(self, username: str, password: str) -> Optional[Tenant]:
        for tenant in self.list_tenants():
            if tenant.username and tenant.username == username and tenant.password == password:
                return tenant
        return None

    def add_tenant(self, tenant: Tenant) -> Tenant:
        sheet_id = self._require_master()
        self.store.ensure_tab(sheet_id, CLIENTS_TAB, CLIENT_HEADERS)

        if not tenant.id:
            tenant.id = f"client_{int(time.time() * 1000)}"
        if not tenant.username:
            tenant.username = re.sub(r"\s+", "", tenant.name).lower()
        if not tenant.password:
            tenant.password = f"{tenant.username}@123"

        self.store.append_values(sheet_id, CLIENTS_RANGE, [tenant_row(tenant)])
        logger.info(f"Added client {tenant.id} ({tenant.name})")
        return tenant


# ==========================================
#  SHEET RESOLUTION
# ==========================================
def parse_cookie_header(header: Optional[str], name: str = CLIENT_COOKIE) -> Optional[str]:
    """Pull one cookie out of a raw Cookie header."""
    if not header:
        return None
    match = re.search(_COOKIE_RE_TEMPLATE.format(name=re.escape(name)), header)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def resolve_sheet_id(
    directory: TenantDirectory,
    default_sheet_id: str,
    tenant_id: Optional[str] = None,
    cookie_tenant_id: Optional[str] = None,
    cookie_header: Optional[str] = None,
) -> str:
    """Pick the spreadsheet for a request.

    Priority: explicit tenant id, then the clientId cookie (structured value
    first, raw header second), then the configured default. Unknown tenants
    and tenants without a sheet fall back to the default. Returns "" when
    nothing at all is configured.
    """
    candidate = tenant_id or cookie_tenant_id or parse_cookie_header(cookie_header)

    if candidate:
        try:
            tenant = directory.find_tenant(candidate)
        except Exception as e:
            logger.error(f"Client lookup for {candidate} failed, using default sheet: {e}")
            tenant = None

        if tenant is not None and tenant.sheet_id:
            logger.debug(f"Using client-specific sheet ID for client {candidate}: {tenant.sheet_id}")
            return tenant.sheet_id

        if tenant is None:
            logger.info(f"Client {candidate} not found, falling back to default sheet")
        else:
            logger.info(f"Client {candidate} has no sheet ID, falling back to default sheet")

    if not default_sheet_id:
        logger.warning("No sheet ID could be resolved and no default is configured")
        return ""
    return default_sheet_id
