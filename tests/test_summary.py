from datetime import datetime, timedelta, timezone

import pytest

from ledgerdesk.outstanding_models import MetaBill
from ledgerdesk.summary import calculate_outstanding_summary, populate_outstanding_summary

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _bill(party, pending, due_offset_days, number="B"):
    due = NOW + timedelta(days=due_offset_days)
    return MetaBill(
        bill_number=number,
        party_name=party,
        pending_amount=pending,
        opening_amount=pending,
        bill_date=due - timedelta(days=30),
        due_date=due,
    )


def test_delayed_bills_and_average():
    late = 10
    bills = [
        _bill("Acme", 100.0, -late - 0.2, "1"),
        _bill("Acme", 50.0, 5, "2"),
    ]
    summary = populate_outstanding_summary("c1", "Acme", bills, NOW)
    assert summary.client_id == "c1"
    assert summary.ledger_name == "Acme"
    assert summary.total_transactions == len(bills)
    assert summary.total_delayed == 1
    assert summary.average_delay_days == late
    assert summary.delay_percentage == 50.0
    assert summary.amount_due == 100.0 + 50.0


def test_no_bills_gives_zero_summary():
    summary = populate_outstanding_summary("c1", "Acme", [], NOW)
    assert summary.total_transactions == 0
    assert summary.delay_percentage == 0
    assert summary.average_delay_days == 0
    assert summary.action_history == []


def test_action_history_follows_bill_dates():
    bills = [_bill("Acme", 1.0, 3, "1"), _bill("Acme", 2.0, 4, "2")]
    summary = populate_outstanding_summary("c1", "Acme", bills, NOW)
    assert [h.date for h in summary.action_history] == [b.bill_date for b in bills]
    assert all(h.action == "Check Payment Status" for h in summary.action_history)
    assert summary.last_action == "Send Reminder"
    assert summary.last_outcome == "Payment Pending"


def test_missing_pending_amount_is_ignored():
    bill = _bill("Acme", 20.0, -2)
    other = _bill("Acme", 20.0, -2)
    other.pending_amount = None
    summary = populate_outstanding_summary("c1", "Acme", [bill, other], NOW)
    assert summary.amount_due == bill.pending_amount
    assert summary.total_delayed == 2


def test_bill_without_bill_date_raises():
    bill = _bill("Acme", 1.0, 1)
    bill.bill_date = None
    with pytest.raises(ValueError):
        populate_outstanding_summary("c1", "Acme", [bill], NOW)


def test_calculate_groups_by_party():
    bills = [
        _bill("Beta", 5.0, -1, "1"),
        _bill("Alpha", 7.0, 2, "2"),
        _bill("Beta", 9.0, 3, "3"),
    ]
    summaries = calculate_outstanding_summary("c9", bills, NOW)
    assert [s.ledger_name for s in summaries] == ["Beta", "Alpha"]
    beta = summaries[0]
    assert beta.total_transactions == 2
    assert beta.amount_due == 5.0 + 9.0
    assert all(s.client_id == "c9" for s in summaries)


def test_summary_document_round_trip():
    summary = calculate_outstanding_summary("c1", [_bill("Acme", 3.0, -4)], NOW)[0]
    restored = type(summary).from_document(summary.to_document())
    assert restored == summary