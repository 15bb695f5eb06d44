"""Party-wise and bill-wise outstanding overviews."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timezone
from typing import Any, TypeVar

from ledgerdesk.outstanding_models import (
    MetaLedger,
    OutstandingOverview,
    OverviewBill,
    OverviewFilter,
)
from ledgerdesk.outstanding_report import IST

T = TypeVar("T")

PARTY_WISE = "party-wise"
GROUP_WISE = "group-wise"
CREDIT_LIMIT_WISE = "credit-limit-wise"
CREDIT_PERIOD_WISE = "credit-period-wise"
BILL_WISE = "bill-wise"
BILL_DATE_WISE = "bill-date-wise"
DUE_DATE_WISE = "due-date-wise"
OPENING_WISE = "opening-wise"
CLOSING_WISE = "closing-wise"
DUE_WISE = "due-wise"
OVER_DUE_WISE = "over-due-wise"
TOTAL_BILLS_WISE = "bill-count-wise"
DELAY_WISE = "delay-days-wise"

# Sort keys that can only be applied after the overviews are computed.
PARTY_LATER_SORT_KEYS = frozenset({OPENING_WISE, CLOSING_WISE, DUE_WISE, OVER_DUE_WISE})
BILL_LATER_SORT_KEYS = frozenset(
    {DUE_WISE, DELAY_WISE, OVER_DUE_WISE, DUE_DATE_WISE, CREDIT_LIMIT_WISE, CREDIT_PERIOD_WISE}
)

_PARTY_SORT_FIELDS = {
    OPENING_WISE: "opening_amount",
    CLOSING_WISE: "closing_amount",
    DUE_WISE: "due_amount",
    OVER_DUE_WISE: "over_due_amount",
    DUE_DATE_WISE: "due_date",
    BILL_DATE_WISE: "bill_date",
    TOTAL_BILLS_WISE: "total_bills",
}

_BILL_SORT_FIELDS = {
    DUE_WISE: "due_amount",
    DELAY_WISE: "delay_days",
    DUE_DATE_WISE: "due_date",
    OVER_DUE_WISE: "over_due_amount",
    CREDIT_LIMIT_WISE: "credit_limit",
    CREDIT_PERIOD_WISE: "credit_days",
}

_SECONDS_PER_DAY = 24 * 60 * 60
_DELAY_MASK = 0xFFFF  # delays are held in 16 bits


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _now(now: datetime | None) -> datetime:
    return _as_utc(now if now is not None else datetime.now(timezone.utc))


def _is_ascending(sort_order: str) -> bool:
    return sort_order.strip().lower() != "desc"


def delay_days(bill_date: datetime, due_date: datetime | None, now: datetime | None = None) -> int:
    """Whole days past the due date (the bill date when there is none), never negative."""
    reference = _as_utc(due_date if due_date is not None else bill_date)
    days = int((_now(now) - reference).total_seconds() / _SECONDS_PER_DAY)
    return days & _DELAY_MASK if days > 0 else 0


def bill_overview(
    bill: OverviewBill, over_due_days: int, now: datetime | None = None
) -> OutstandingOverview:
    """Overview row of one bill, with its closing amount in the due or over-due column.

    Raises ValueError when the bill lacks its group, balances or bill date.
    """
    missing = [
        name
        for name in ("ledger_group_name", "opening_balance", "closing_balance", "bill_date")
        if getattr(bill, name) is None
    ]
    if missing:
        raise ValueError(f"bill {bill.bill_number!r} is missing {', '.join(missing)}")

    bill_date = _as_utc(bill.bill_date).astimezone(IST)
    due_date = bill_date if bill.due_date is None else _as_utc(bill.due_date).astimezone(IST)
    delay = delay_days(bill_date, due_date, now)

    overview = OutstandingOverview(
        party_name=bill.ledger_name,
        bill_number=bill.bill_number,
        ledger_group=bill.ledger_group_name,
        opening_amount=bill.opening_balance,
        closing_amount=bill.closing_balance,
        bill_date=bill_date,
        due_date=due_date,
        delay_days=delay,
        is_advance=bill.is_advance,
    )
    if delay <= over_due_days:
        overview.due_amount = overview.closing_amount
    else:
        overview.over_due_amount = overview.closing_amount
    return overview


def party_overview(
    ledger: MetaLedger,
    bills: list[OutstandingOverview] | None,
    deduct_advance: bool = False,
) -> OutstandingOverview:
    """Totals of a party's bill rows; ``bills`` of None means no rows were gathered.

    With ``deduct_advance`` the amounts of advance bills are subtracted.
    """
    overview = OutstandingOverview(
        party_name=ledger.name,
        ledger_group=ledger.group,
        credit_limit=ledger.credit_limit,
        credit_days=ledger.credit_period,
    )
    if bills is None:
        return overview

    overview.bills = bills
    for bill in bills:
        overview.opening_amount += bill.opening_amount
        if deduct_advance and bill.is_advance:
            overview.closing_amount -= bill.closing_amount
            overview.due_amount -= bill.due_amount
            overview.over_due_amount -= bill.over_due_amount
            continue
        overview.closing_amount += bill.closing_amount
        overview.due_amount += bill.due_amount
        overview.over_due_amount += bill.over_due_amount

    received = overview.opening_amount - overview.closing_amount
    percent_received = (
        (received / overview.opening_amount) * 100 if overview.opening_amount > 0 else 0.0
    )
    overview.received_percentage = percent_received
    overview.pending_percentage = 100 - percent_received
    overview.total_bills = len(bills)
    return overview


def sort_overviews(overviews: list[Any], field: str, ascending: bool = True) -> list[Any]:
    """Sort in place by an attribute; rows where it is None go last. Returns the list."""
    present = [item for item in overviews if getattr(item, field) is not None]
    absent = [item for item in overviews if getattr(item, field) is None]
    present.sort(key=lambda item: getattr(item, field), reverse=not ascending)
    overviews[:] = present + absent
    return overviews


def paginate(items: Sequence[T], limit: int, offset: int) -> list[T]:
    """Page ``offset`` (counted in pages) of ``limit`` items; a limit of 0 means no limit."""
    if limit < 0 or offset < 0:
        raise ValueError("limit and offset must not be negative")
    if limit == 0:
        return list(items)
    start = offset * limit
    return list(items[start : start + limit])


def _party_chunks(ledgers: Sequence[MetaLedger]) -> Iterator[Sequence[MetaLedger]]:
    """Split ledgers into about four batches.

    The end of the final batch stops one short of the list, so the last
    ledger takes part in no batch and gets no bills gathered.
    """
    total = len(ledgers)
    if total == 0:
        return
    size = math.ceil(total * 0.25)
    count = math.ceil(total / size)
    for number in range(count):
        start = size * number
        end = start + size
        if end >= total:
            end = total - 1
        yield ledgers[start:end]


def party_wise_overview(
    ledgers: Iterable[MetaLedger],
    bills: Iterable[OverviewBill],
    over_due_days: int,
    filter: OverviewFilter,
    now: datetime | None = None,
) -> list[OutstandingOverview]:
    """One overview per ledger, totalling that ledger's bills.

    A batch of ledgers with no bills at all gets one empty row per ledger.
    When sorting on a computed amount, the rows are sorted and paged here;
    otherwise ``ledgers`` is taken to be the requested page already.
    """
    now = _now(now)
    ledgers = list(ledgers)
    bills = list(bills)
    request = filter.filter
    use_pagination = request.sort_key not in PARTY_LATER_SORT_KEYS
    party_by_name = {ledger.name: ledger for ledger in ledgers}

    summary: dict[str, list[OutstandingOverview]] = {}
    for chunk in _party_chunks(ledgers):
        names = [ledger.name for ledger in chunk]
        wanted = set(names)
        chunk_bills = [bill for bill in bills if bill.ledger_name in wanted]
        if not chunk_bills:
            for name in names:
                info = party_by_name[name]
                summary[name] = [
                    OutstandingOverview(
                        party_name=name,
                        ledger_group=info.group,
                        credit_days=info.credit_period,
                        credit_limit=info.credit_limit,
                    )
                ]
            continue
        for bill in chunk_bills:
            summary.setdefault(bill.ledger_name, []).append(bill_overview(bill, over_due_days, now))

    overviews = [
        party_overview(ledger, summary.get(ledger.name), filter.deduct_advance_payment)
        for ledger in ledgers
    ]

    if not use_pagination:
        field = _PARTY_SORT_FIELDS.get(request.sort_key, "party_name")
        sort_overviews(overviews, field, _is_ascending(request.sort_order))
        overviews = paginate(overviews, request.batch.limit, request.batch.offset)
    return overviews


def bill_wise_overview(
    bills: Iterable[OverviewBill],
    ledgers: Iterable[MetaLedger],
    over_due_days: int,
    filter: OverviewFilter,
    now: datetime | None = None,
) -> list[OutstandingOverview]:
    """One overview per bill, with the party's credit terms; bills of unknown parties are dropped.

    When sorting on a computed field, the rows are sorted and paged here;
    otherwise ``bills`` is taken to be the requested page already.
    """
    now = _now(now)
    request = filter.filter
    use_pagination = request.sort_key not in BILL_LATER_SORT_KEYS
    party_by_name = {ledger.name: ledger for ledger in ledgers}

    overviews = []
    for bill in bills:
        overview = bill_overview(bill, over_due_days, now)
        party = party_by_name.get(overview.party_name)
        if party is None:
            continue
        overview.credit_limit = party.credit_limit
        overview.credit_days = party.credit_period
        overviews.append(overview)

    if not use_pagination:
        field = _BILL_SORT_FIELDS.get(request.sort_key, "party_name")
        sort_overviews(overviews, field, _is_ascending(request.sort_order))
        overviews = paginate(overviews, request.batch.limit, request.batch.offset)
    return overviews