# backend/models/transactions.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Rows of the "Purchase" and "Sales" tabs. Creating one of these also moves
# the matching InventoryItem's stock; the two writes are independent.

@dataclass
class PurchaseItem:
    sr_no: float
    product: str
    quantity: float = 0
    unit: str = "PCS"
    po_number: str = ""
    supplier: str = ""
    date_of_receiving: str = ""
    rack_number: str = ""
    timestamp: Optional[str] = None
    parse_errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def event_date(self) -> str:
        # A fine-grained timestamp wins over the date-only field
        return self.timestamp or self.date_of_receiving


@dataclass
class SalesItem:
    sr_no: float
    product: str
    quantity: float = 0
    unit: str = "PCS"
    contact: str = ""
    company_name: str = ""
    indent_number: str = ""
    date_of_issue: str = ""
    timestamp: Optional[str] = None
    parse_errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def event_date(self) -> str:
        return self.timestamp or self.date_of_issue


# Supplier
# Either field may be blank: purchases register a supplier, sales a company.
@dataclass
class Supplier:
    supplier: str = ""
    company_name: str = ""
    parse_errors: List[Tuple[str, str]] = field(default_factory=list)
