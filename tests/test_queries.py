import pytest

from ledgerdesk.queries import (
    bill_projection,
    company_guid_filter,
    item_search_field,
    item_sort_field,
    outstanding_filter,
    outstanding_search_field,
    outstanding_sort_field,
    parent_group_name,
)


@pytest.mark.parametrize(
    "key, field",
    [("Party", "LedgerName"), ("Group", "LedgerGroupName"), ("Bill", "Name")],
)
def test_outstanding_fields(key, field):
    assert outstanding_sort_field(key) == field
    assert outstanding_search_field(key) == field


@pytest.mark.parametrize("key", ["", "party", "Unknown"])
def test_outstanding_fields_default_to_party(key):
    assert outstanding_sort_field(key) == "LedgerName"
    assert outstanding_search_field(key) == "LedgerName"


@pytest.mark.parametrize(
    "key, field",
    [
        ("Item", "Name"),
        ("Group", "StockGroup"),
        ("Quantity", "ClosingBal.Number"),
        ("Rate", "ClosingRate.RatePerUnit"),
        ("Amount", "ClosingValue.Amount"),
        ("Other", "Name"),
    ],
)
def test_item_sort_field(key, field):
    assert item_sort_field(key) == field


def test_item_search_field():
    assert item_search_field("Group") == "StockGroup"
    assert item_search_field("Item") == "Name"
    assert item_search_field("Amount") == "Name"


def test_company_guid_filter_anchors_prefix():
    assert company_guid_filter("abc") == {"GUID": {"$regex": "^abc"}}


def test_parent_group_name():
    assert parent_group_name(True) == "Current Assets"
    assert parent_group_name(False) == "Current Liabilities"


def test_outstanding_filter():
    result = outstanding_filter("c1", iter(["Sundry Debtors"]), True)
    assert result == {
        "CompanyId": "c1",
        "LedgerGroupName": {"$in": ["Sundry Debtors"]},
        "ClosingBal": {"$ne": None},
        "ClosingBal.IsDebit": True,
    }


def test_bill_projection_flattens_amounts():
    projection = bill_projection()
    assert projection["Amount"] == "$ClosingBal.Amount"
    assert projection["DueDate"] == "$BillCreditPeriod.DueDate"
    assert projection["_id"] == 0
    projection["Amount"] = "changed"
    assert bill_projection()["Amount"] == "$ClosingBal.Amount"