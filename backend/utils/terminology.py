# backend/utils/terminology.py
from typing import Optional

# Clients that book goods in as "Received" and out as "Issue"
STORE_TERMINOLOGY_CLIENTS = {"smeltech", "cranoist"}


def _uses_store_terms(client_name: Optional[str]) -> bool:
    return bool(client_name) and client_name.lower() in STORE_TERMINOLOGY_CLIENTS


def get_purchase_term(client_name: Optional[str] = None) -> str:
    return "Received" if _uses_store_terms(client_name) else "Purchase"


def get_sales_term(client_name: Optional[str] = None) -> str:
    return "Issue" if _uses_store_terms(client_name) else "Sales"
