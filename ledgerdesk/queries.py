"""Field mappings and query fragments for outstanding and inventory reports."""

from __future__ import annotations

from typing import Any, Iterable

ASSETS_GROUP = "Current Assets"
LIABILITIES_GROUP = "Current Liabilities"

_OUTSTANDING_FIELDS = {
    "Party": "LedgerName",
    "Group": "LedgerGroupName",
    "Bill": "Name",
}

_ITEM_SORT_FIELDS = {
    "Item": "Name",
    "Group": "StockGroup",
    "Quantity": "ClosingBal.Number",
    "Rate": "ClosingRate.RatePerUnit",
    "Amount": "ClosingValue.Amount",
}

_ITEM_SEARCH_FIELDS = {
    "Item": "Name",
    "Group": "StockGroup",
}


def outstanding_sort_field(sort_key: str) -> str:
    """Bill field to sort on for a client sort key; unknown keys sort by party."""
    return _OUTSTANDING_FIELDS.get(sort_key, _OUTSTANDING_FIELDS["Party"])


def outstanding_search_field(search_key: str) -> str:
    """Bill field to search in for a client search key; unknown keys search by party."""
    return _OUTSTANDING_FIELDS.get(search_key, _OUTSTANDING_FIELDS["Party"])


def item_sort_field(sort_key: str) -> str:
    """Stock item field to sort on; unknown keys sort by item name."""
    return _ITEM_SORT_FIELDS.get(sort_key, _ITEM_SORT_FIELDS["Item"])


def item_search_field(search_key: str) -> str:
    """Stock item field to search in; unknown keys search by item name."""
    return _ITEM_SEARCH_FIELDS.get(search_key, _ITEM_SEARCH_FIELDS["Item"])


def company_guid_filter(company_id: str) -> dict[str, Any]:
    """Match documents whose GUID starts with the company id."""
    return {"GUID": {"$regex": "^" + company_id}}


def parent_group_name(is_debit: bool) -> str:
    """Top ledger group whose bills make up receivables or payables."""
    return ASSETS_GROUP if is_debit else LIABILITIES_GROUP


def outstanding_filter(company_id: str, groups: Iterable[str], is_debit: bool) -> dict[str, Any]:
    """Match open bills of a company in the given ledger groups and balance side."""
    return {
        "CompanyId": company_id,
        "LedgerGroupName": {"$in": list(groups)},
        "ClosingBal": {"$ne": None},
        "ClosingBal.IsDebit": is_debit,
    }


def bill_projection() -> dict[str, Any]:
    """Projection that flattens a stored bill into the report's fields."""
    return {
        "LedgerName": 1,
        "LedgerGroupName": 1,
        "BillDate": "$BillDate.Date",
        "DueDate": "$BillCreditPeriod.DueDate",
        "Amount": "$ClosingBal.Amount",
        "OpeningAmount": "$OpeningBal.Amount",
        "Name": "$Name",
        "_id": 0,
    }