# backend/models/tenant.py
from dataclasses import dataclass, field
from typing import List, Tuple

# Tenant
# One client of the system, as listed in the "Clients" tab of the master
# spreadsheet. Each tenant keeps its inventory in its own spreadsheet (sheet_id).
@dataclass
class Tenant:
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    logo_url: str = ""
    sheet_id: str = ""
    username: str = ""
    password: str = ""
    parse_errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def notifiable(self) -> bool:
        # Scheduled emails need somewhere to read from and someone to write to
        return bool(self.email and self.sheet_id)


# Column order used when the Clients tab is created from scratch
CLIENT_HEADERS = ["ID", "Name", "Email", "Phone", "Logo URL", "Sheet ID", "Username", "Password"]


def tenant_row(tenant: Tenant) -> List[str]:
    return [
        tenant.id,
        tenant.name,
        tenant.email,
        tenant.phone or "",
        tenant.logo_url or "",
        tenant.sheet_id or "",
        tenant.username,
        tenant.password,
    ]
