"""Aging overview of outstanding bills and upcoming-dues grouping."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timedelta, timezone

from ledgerdesk.outstanding_models import (
    AgingOverview,
    DurationSummary,
    MetaLedger,
    OverviewBill,
    OverviewFilter,
    PartySummary,
)
from ledgerdesk.outstanding_report import IST
from ledgerdesk.overview import delay_days, paginate, sort_overviews

ABOVE_30_WISE = "above-30-wise"
ABOVE_60_WISE = "above-60-wise"
ABOVE_90_WISE = "above-90-wise"
ABOVE_120_WISE = "above-120-wise"

# Sort keys that can only be applied after the aging rows are computed.
AGING_LATER_SORT_KEYS = frozenset({ABOVE_30_WISE, ABOVE_60_WISE, ABOVE_90_WISE, ABOVE_120_WISE})

_AGING_SORT_FIELDS = {
    ABOVE_120_WISE: "above120",
    ABOVE_90_WISE: "above90",
    ABOVE_60_WISE: "above60",
    ABOVE_30_WISE: "above30",
}

_THRESHOLDS = (30, 60, 90, 120)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _to_ist(moment: datetime) -> datetime:
    return _as_utc(moment).astimezone(IST)


def _now(now: datetime | None) -> datetime:
    return _as_utc(now if now is not None else datetime.now(timezone.utc))


def _is_ascending(sort_order: str) -> bool:
    return sort_order.strip().lower() != "desc"


def aging_buckets(delay: int, amount: float, use_range: bool) -> tuple[float, float, float, float]:
    """Spread ``amount`` over the 30/60/90/120-day columns for a bill ``delay`` days late.

    With ``use_range`` the amount lands in exactly one bracket; otherwise it
    lands in every column whose threshold the delay has reached.
    """
    if use_range:
        columns = [0.0, 0.0, 0.0, 0.0]
        for index, low in enumerate(_THRESHOLDS):
            high = _THRESHOLDS[index + 1] if index + 1 < len(_THRESHOLDS) else None
            if delay >= low and (high is None or delay < high):
                columns[index] = amount
                break
        return (columns[0], columns[1], columns[2], columns[3])
    a30, a60, a90, a120 = (amount if delay >= low else 0.0 for low in _THRESHOLDS)
    return (a30, a60, a90, a120)


def aging_bill(bill: OverviewBill, use_range: bool, now: datetime | None = None) -> AgingOverview:
    """Aging row of one bill.

    Raises ValueError when the bill lacks its group, balances or bill date.
    """
    missing = [
        name
        for name in ("ledger_group_name", "opening_balance", "closing_balance", "bill_date")
        if getattr(bill, name) is None
    ]
    if missing:
        raise ValueError(f"bill {bill.bill_number!r} is missing {', '.join(missing)}")

    bill_date = _to_ist(bill.bill_date)
    due_date = bill_date if bill.due_date is None else _to_ist(bill.due_date)
    delay = delay_days(bill_date, due_date, now)
    above30, above60, above90, above120 = aging_buckets(delay, bill.closing_balance, use_range)

    return AgingOverview(
        party_name=bill.ledger_name,
        bill_number=bill.bill_number,
        ledger_group=bill.ledger_group_name,
        opening_amount=bill.opening_balance,
        closing_amount=bill.closing_balance,
        bill_date=bill_date,
        due_date=due_date,
        delay_days=delay,
        is_advance=bill.is_advance,
        above30=above30,
        above60=above60,
        above90=above90,
        above120=above120,
    )


def aging_party(ledger: MetaLedger, bills: list[AgingOverview] | None) -> AgingOverview:
    """Totals of a party's aging rows; ``bills`` of None means no rows were gathered."""
    overview = AgingOverview(
        party_name=ledger.name,
        ledger_group=ledger.group,
        credit_limit=ledger.credit_limit,
        credit_days=ledger.credit_period,
    )
    if bills is None:
        return overview
    for bill in bills:
        overview.opening_amount += bill.opening_amount
        overview.closing_amount += bill.closing_amount
        overview.above30 += bill.above30
        overview.above60 += bill.above60
        overview.above90 += bill.above90
        overview.above120 += bill.above120
    overview.total_bills = len(bills)
    overview.bills = bills
    return overview


def _party_chunks(ledgers: Sequence[MetaLedger]) -> Iterator[Sequence[MetaLedger]]:
    """Split ledgers into about four batches covering every ledger."""
    total = len(ledgers)
    if total == 0:
        return
    size = math.ceil(total * 0.25)
    for start in range(0, total, size):
        yield ledgers[start : min(start + size, total)]


def aging_overview(
    ledgers: Iterable[MetaLedger],
    bills: Iterable[OverviewBill],
    use_range: bool,
    filter: OverviewFilter,
    now: datetime | None = None,
) -> list[AgingOverview]:
    """One aging row per ledger, sorted and paged as the filter asks.

    A batch of ledgers with no bills at all gets one empty row per ledger.
    The rows are always sorted (by party name unless an aging column is
    asked for) and then paged.
    """
    now = _now(now)
    ledgers = list(ledgers)
    bills = list(bills)
    request = filter.filter
    party_by_name = {ledger.name: ledger for ledger in ledgers}

    summary: dict[str, list[AgingOverview]] = {}
    for chunk in _party_chunks(ledgers):
        names = [ledger.name for ledger in chunk]
        wanted = set(names)
        chunk_bills = [bill for bill in bills if bill.ledger_name in wanted]
        if not chunk_bills:
            for name in names:
                info = party_by_name[name]
                summary[name] = [
                    AgingOverview(
                        party_name=name,
                        ledger_group=info.group,
                        credit_days=info.credit_period,
                        credit_limit=info.credit_limit,
                    )
                ]
            continue
        for bill in chunk_bills:
            summary.setdefault(bill.ledger_name, []).append(aging_bill(bill, use_range, now))

    overviews = [aging_party(ledger, summary.get(ledger.name)) for ledger in ledgers]

    field = _AGING_SORT_FIELDS.get(request.sort_key, "party_name")
    sort_overviews(overviews, field, _is_ascending(request.sort_order))
    return paginate(overviews, request.batch.limit, request.batch.offset)


def _short_date(moment: datetime) -> str:
    return f"{moment.day} {_MONTHS[moment.month - 1]} {moment.year:04d}"


def duration_key(due_date: datetime, duration_type: str) -> str:
    """Label of the period (in Indian time) that a due date falls in.

    Weeks run Monday to Sunday of the following week's start; a Sunday
    counts toward the week starting the next day.
    """
    moment = _to_ist(due_date)
    month = _MONTHS[moment.month - 1]
    if duration_type == "Daily":
        return f"{moment.day:02d}-{month}-{moment.year:04d}"
    if duration_type == "Weekly":
        sunday_based = (moment.weekday() + 1) % 7
        start = moment + timedelta(days=1 - sunday_based)
        end = start + timedelta(days=6)
        return f"{_short_date(start)} to {_short_date(end)}"
    if duration_type == "Monthly":
        return f"{month}-{moment.year:04d}"
    if duration_type == "Yearly":
        return f"{moment.year:04d}"
    return "Unknown"


def upcoming_overview(
    bills: Iterable[OverviewBill],
    duration_type: str,
    keys: Iterable[str],
    now: datetime | None = None,
) -> list[DurationSummary]:
    """Group bills not yet due by period and then by party.

    Every key in ``keys`` appears even when no bill falls in it; bills due
    before ``now`` are left out. Raises ValueError for a bill without a bill date.
    """
    today = _now(now).astimezone(IST)
    by_key: dict[str, list[OverviewBill]] = {key: [] for key in keys}

    for bill in bills:
        if bill.bill_date is None:
            raise ValueError(f"bill {bill.bill_number!r} has no bill date")
        due = _to_ist(bill.due_date if bill.due_date is not None else bill.bill_date)
        if due < today:
            continue
        by_key.setdefault(duration_key(due, duration_type), []).append(bill)

    result = []
    for key, key_bills in by_key.items():
        by_party: dict[str, list[OverviewBill]] = {}
        for bill in key_bills:
            by_party.setdefault(bill.ledger_name, []).append(bill)

        parties = [
            PartySummary(
                party_name=party,
                bills=party_bills,
                total_amount=sum(
                    b.closing_balance for b in party_bills if b.closing_balance is not None
                ),
            )
            for party, party_bills in by_party.items()
        ]
        result.append(
            DurationSummary(
                duration_key=key,
                total_amount=sum(p.total_amount for p in parties),
                parties=parties,
            )
        )
    return result