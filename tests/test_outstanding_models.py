from datetime import datetime, timezone

import pytest

from ledgerdesk.models import EmailSettings, Pagination
from ledgerdesk.outstanding_models import (
    DSP,
    DueDayFilter,
    DueType,
    DurationSummary,
    LocationReportType,
    MetaBill,
    MetaLedger,
    OsReportFilter,
    OsShareSettings,
    OverviewBill,
    OverviewFilter,
    PartySummary,
    ReminderInterval,
    ReportType,
)


def test_meta_bill_parses_text_amounts():
    bill_date = datetime(2024, 1, 5, tzinfo=timezone.utc)
    bill = MetaBill.from_document(
        {
            "Name": "INV-1",
            "LedgerName": "Acme",
            "LedgerGroupName": "Sundry Debtors",
            "Amount": " 1500\x00",
            "OpeningAmount": 2000,
            "BillDate": bill_date,
        }
    )
    assert bill.pending_amount == 1500.0
    assert bill.opening_amount == 2000.0
    assert bill.bill_date == bill_date
    assert bill.due_date is None
    assert bill.party_name == "Acme"


def test_meta_bill_missing_amounts_are_none():
    bill = MetaBill.from_document({"Name": "INV-2", "LedgerName": "Acme"})
    assert bill.pending_amount is None
    assert bill.opening_amount is None
    assert bill.parent_group is None


def test_meta_bill_rejects_bad_amount():
    with pytest.raises(ValueError):
        MetaBill.from_document({"Amount": "n/a"})


def test_os_share_settings_round_trip():
    settings = OsShareSettings(
        company_id="company-1",
        cut_off_date="2024-04-01",
        template_name="default",
        due_days=15,
        over_due_days=30,
        send_due_only=True,
        email_setting=EmailSettings(to=["a@example.com"], subject="Reminder"),
        auto_reminder_interval=ReminderInterval.WEEKLY,
        reminder_interval_days=7,
    )
    doc = settings.to_document()
    assert "_id" not in doc
    assert OsShareSettings.from_document(doc) == settings


def test_os_share_settings_keeps_id():
    settings = OsShareSettings(company_id="c", id="abc")
    assert settings.to_document()["_id"] == "abc"
    assert OsShareSettings.from_document(settings.to_document()).id == "abc"


def test_os_report_filter_from_dict_maps_enums():
    f = OsReportFilter.from_dict(
        {
            "PartyName": "Acme",
            "Limit": 10,
            "Offset": 1,
            "Groups": ["Sundry Debtors"],
            "DueFilter": 3,
            "ReportOnType": 1,
        }
    )
    assert f.due_filter is DueDayFilter.OVER_DUE_BILLS
    assert f.report_on_type is ReportType.BILL_WISE
    assert f.groups == ["Sundry Debtors"]
    assert f.limit == 10


def test_os_report_filter_defaults():
    f = OsReportFilter.from_dict(None)
    assert f.due_filter is DueDayFilter.ALL_BILLS
    assert f.report_on_type is ReportType.PARTY_WISE


def test_os_report_filter_rejects_unknown_due_filter():
    with pytest.raises(ValueError):
        OsReportFilter.from_dict({"DueFilter": 9})


def test_location_report_type_values():
    assert LocationReportType("Region") is LocationReportType.REGION
    assert LocationReportType("Pincode") is LocationReportType.PINCODE


def test_overview_filter_from_dict():
    f = OverviewFilter.from_dict(
        {
            "Filter": {"Batch": {"Apply": True, "Limit": 5}, "SortKey": "party-wise"},
            "IsDebit": True,
            "DueType": "overDue",
            "Parties": ["Acme"],
        }
    )
    assert f.due_type is DueType.OVER_DUE
    assert f.is_debit is True
    assert f.filter.batch == Pagination(apply=True, limit=5, offset=0)
    assert f.filter.sort_key == "party-wise"
    assert f.parties == ["Acme"]


def test_overview_filter_rejects_unknown_due_type():
    with pytest.raises(ValueError):
        OverviewFilter.from_dict({"DueType": "sometimes"})


def test_meta_ledger_optional_fields():
    ledger = MetaLedger.from_document({"Name": "Acme", "Group": "Sundry Debtors", "PinCode": "560001"})
    assert ledger.pin_code == "560001"
    assert ledger.credit_limit is None
    assert ledger.email is None


def test_dsp_round_trip():
    entry = DSP(office_name="Main", pincode="560001", district="Urban", state_name="Karnataka")
    assert DSP.from_document(entry.to_document()) == entry
    assert entry.to_document()["StateName"] == "Karnataka"


def test_overview_bill_from_document():
    bill = OverviewBill.from_document(
        {"Name": "B1", "LedgerName": "Acme", "ClosingBalance": "250.5", "IsAdvance": True}
    )
    assert bill.closing_balance == 250.5
    assert bill.is_advance is True
    assert bill.opening_balance is None


def test_duration_summary_to_dict_uses_snake_keys():
    party = PartySummary(party_name="Acme", total_amount=10.0)
    summary = DurationSummary(duration_key="Jan-2024", total_amount=10.0, parties=[party])
    out = summary.to_dict()
    assert out["duration_key"] == "Jan-2024"
    assert out["parties"][0]["party_name"] == "Acme"
    assert out["parties"][0]["bills"] == []