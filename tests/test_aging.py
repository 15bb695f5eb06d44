from datetime import datetime, timedelta, timezone

import pytest

from ledgerdesk.aging import (
    aging_bill,
    aging_buckets,
    aging_overview,
    aging_party,
    duration_key,
    upcoming_overview,
)
from ledgerdesk.models import Pagination, RequestFilter
from ledgerdesk.outstanding_models import MetaLedger, OverviewBill, OverviewFilter
from ledgerdesk.outstanding_report import IST

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _bill(party, days_late, closing, opening=None, number="B1"):
    due = NOW - timedelta(days=days_late, hours=1)
    return OverviewBill(
        bill_number=number,
        ledger_name=party,
        ledger_group_name="Sundry Debtors",
        opening_balance=opening if opening is not None else closing,
        closing_balance=closing,
        bill_date=due,
        due_date=due,
    )


@pytest.mark.parametrize("delay, index", [(30, 0), (59, 0), (60, 1), (95, 2), (500, 3)])
def test_buckets_with_range_fill_one_column(delay, index):
    amount = 250.0
    buckets = aging_buckets(delay, amount, True)
    assert buckets[index] == amount
    assert sum(buckets) == amount


@pytest.mark.parametrize("use_range", [True, False])
def test_buckets_below_thirty_are_empty(use_range):
    buckets = aging_buckets(29, 100.0, use_range)
    assert tuple(buckets) == (0, 0, 0, 0)
    assert sum(buckets) == 0


def test_buckets_without_range_are_cumulative():
    amount = 80.0
    buckets = aging_buckets(95, amount, False)
    assert buckets[:3] == (amount, amount, amount)
    assert buckets[3] == 0


def test_aging_bill_uses_closing_balance():
    bill = _bill("Acme", 65, closing=40.0, opening=90.0)
    row = aging_bill(bill, True, NOW)
    assert row.delay_days == 65
    assert row.above60 == bill.closing_balance
    assert row.above30 == row.above90 == row.above120 == 0
    assert row.opening_amount == bill.opening_balance
    assert row.due_date.utcoffset() == IST.utcoffset(None)


def test_aging_bill_missing_date_raises():
    bill = _bill("Acme", 10, closing=1.0)
    bill.bill_date = None
    with pytest.raises(ValueError):
        aging_bill(bill, True, NOW)


def test_aging_party_sums_rows():
    ledger = MetaLedger(name="Acme", group="Sundry Debtors", credit_limit="1000")
    rows = [aging_bill(_bill("Acme", d, c), False, NOW) for d, c in ((35, 10.0), (130, 20.0))]
    party = aging_party(ledger, rows)
    assert party.total_bills == len(rows)
    assert party.closing_amount == 10.0 + 20.0
    assert party.above30 == 10.0 + 20.0
    assert party.above120 == 20.0
    assert party.credit_limit == ledger.credit_limit
    assert party.bills is rows


def test_aging_party_without_rows_is_empty():
    party = aging_party(MetaLedger(name="Solo", group="G"), None)
    assert party.bills is None
    assert party.total_bills == 0
    assert party.closing_amount == 0


def test_aging_overview_sorts_and_fills_empty_parties():
    ledgers = [MetaLedger(name="Alpha", group="G"), MetaLedger(name="Beta", group="G")]
    bills = [_bill("Alpha", 45, 100.0), _bill("Alpha", 10, 5.0, number="B2")]
    request = RequestFilter(batch=Pagination(limit=0), sort_key="above-30-wise", sort_order="desc")
    rows = aging_overview(ledgers, bills, True, OverviewFilter(filter=request), NOW)

    assert [row.party_name for row in rows] == ["Alpha", "Beta"]
    alpha, beta = rows
    assert alpha.total_bills == len(bills)
    assert alpha.closing_amount == 100.0 + 5.0
    assert alpha.above30 == 100.0
    assert beta.total_bills == 1
    assert beta.closing_amount == 0


def test_aging_overview_pages_results():
    ledgers = [MetaLedger(name=name, group="G") for name in ("Cee", "Ay", "Bee")]
    request = RequestFilter(batch=Pagination(limit=2, offset=1))
    rows = aging_overview(ledgers, [], False, OverviewFilter(filter=request), NOW)
    assert [row.party_name for row in rows] == ["Cee"]


def test_duration_key_formats():
    due = datetime(2024, 3, 5, 10, 0, tzinfo=IST)
    assert duration_key(due, "Daily") == "05-Mar-2024"
    assert duration_key(due, "Monthly") == "Mar-2024"
    assert duration_key(due, "Weekly") == "4 Mar 2024 to 10 Mar 2024"
    assert duration_key(due, "Yearly") == "2024"
    assert duration_key(due, "Hourly") == "Unknown"


def test_upcoming_overview_groups_future_bills():
    future = NOW + timedelta(days=3)
    bills = [
        OverviewBill(bill_number="1", ledger_name="Acme", bill_date=future, closing_balance=7.0),
        OverviewBill(bill_number="2", ledger_name="Acme", bill_date=future, closing_balance=3.0),
        OverviewBill(bill_number="3", ledger_name="Zed", bill_date=NOW - timedelta(days=2),
                     closing_balance=99.0),
    ]
    key = duration_key(future, "Daily")
    result = upcoming_overview(bills, "Daily", ["empty-slot", key], NOW)

    by_key = {summary.duration_key: summary for summary in result}
    assert set(by_key) == {"empty-slot", key}
    assert by_key["empty-slot"].parties == []
    assert by_key["empty-slot"].total_amount == 0
    summary = by_key[key]
    assert [p.party_name for p in summary.parties] == ["Acme"]
    assert summary.total_amount == 7.0 + 3.0
    assert len(summary.parties[0].bills) == 2


def test_upcoming_overview_requires_bill_date():
    bill = OverviewBill(bill_number="X", ledger_name="Acme")
    with pytest.raises(ValueError):
        upcoming_overview([bill], "Daily", [], NOW)