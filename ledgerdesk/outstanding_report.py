"""Bill-wise and party-wise outstanding report building."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Sequence

from ledgerdesk.outstanding_models import Bill, DueDayFilter

IST = timezone(timedelta(hours=5, minutes=30))
DATE_LAYOUT = "%Y-%m-%d %H:%M:%S"
_SECONDS_PER_DAY = 24 * 60 * 60


def parse_float64(value: Any) -> float:
    """Read an amount that may be a number or numeric text; anything else is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        if value != value.strip() or "_" in value:
            return 0.0
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _ist_text(moment: datetime) -> str:
    return _as_utc(moment).astimezone(IST).strftime(DATE_LAYOUT)


def _category(days: int, over_due_days: int) -> DueDayFilter:
    if 0 < days <= over_due_days:
        return DueDayFilter.DUE_BILLS
    if days > over_due_days:
        return DueDayFilter.OVER_DUE_BILLS
    return DueDayFilter.PENDING_BILLS


def make_bill(item: Mapping[str, Any], over_due_days: int, now: datetime | None = None) -> Bill:
    """Turn a projected bill document into a report row.

    Dates are shown in Indian time. The delay counts whole days from the
    due date (or the bill date when there is none) to ``now``; the closing
    amount lands in the due, over-due or not-yet-due column accordingly.
    """
    now_utc = _as_utc(now if now is not None else datetime.now(timezone.utc))
    bill_date = _ist_text(item["BillDate"])
    due_value = item.get("DueDate")
    due_date = bill_date if due_value is None else _ist_text(due_value)

    # The local wall-clock text is read back as if it were UTC.
    parsed_due = datetime.strptime(due_date, DATE_LAYOUT).replace(tzinfo=timezone.utc)
    days = int((now_utc - parsed_due).total_seconds() / _SECONDS_PER_DAY)

    amount = parse_float64(item.get("Amount"))
    bill = Bill(
        ledger_name=item["LedgerName"],
        ledger_group_name=item["LedgerGroupName"],
        bill_name=item["Name"],
        opening_amount=parse_float64(item.get("OpeningAmount")),
        closing_amount=amount,
        due_date=due_date,
        bill_date=bill_date,
        delay_days=days,
    )
    category = _category(days, over_due_days)
    if category is DueDayFilter.DUE_BILLS:
        bill.due_amount = amount
    elif category is DueDayFilter.OVER_DUE_BILLS:
        bill.over_due_amount = amount
    else:
        bill.amount = amount
    return bill


def build_bills(
    items: Iterable[Mapping[str, Any]],
    over_due_days: int,
    due_filter: DueDayFilter = DueDayFilter.ALL_BILLS,
    now: datetime | None = None,
) -> list[Bill]:
    """Report rows for ``items``, keeping only those in ``due_filter``."""
    now = now if now is not None else datetime.now(timezone.utc)
    bills = []
    for item in items:
        bill = make_bill(item, over_due_days, now)
        if due_filter is not DueDayFilter.ALL_BILLS and _category(
            bill.delay_days, over_due_days
        ) is not due_filter:
            continue
        bills.append(bill)
    return bills


def summarize_parties(bills: Iterable[Bill]) -> list[Bill]:
    """One row per party with summed amounts and paid/pending percentages.

    Parties appear in the order of their first bill.
    """
    grouped: dict[str, list[Bill]] = {}
    for bill in bills:
        grouped.setdefault(bill.ledger_name, []).append(bill)

    summaries = []
    for party_bills in grouped.values():
        first = party_bills[0]
        total_opening = sum(b.opening_amount for b in party_bills)
        total_closing = sum(b.closing_amount for b in party_bills)
        paid = total_opening - total_closing
        percent_paid = (paid / total_opening) * 100 if total_opening > 0 else 0.0
        summaries.append(
            Bill(
                ledger_name=first.ledger_name,
                ledger_group_name=first.ledger_group_name,
                opening_amount=total_opening,
                closing_amount=total_closing,
                amount=sum(b.amount for b in party_bills),
                due_amount=sum(b.due_amount for b in party_bills),
                over_due_amount=sum(b.over_due_amount for b in party_bills),
                pending_percentage=100 - percent_paid,
                paid_percentage=percent_paid,
            )
        )
    return summaries


def page_party_bills(bills: Sequence[Bill], offset: int, limit: int) -> list[Bill]:
    """Page ``offset`` of ``limit`` rows; an offset past the end starts over at the first page."""
    if offset < 0 or limit < 0:
        raise ValueError("offset and limit must not be negative")
    length = len(bills)
    skip = offset * limit
    if skip > length:
        skip = 0
    take = min(limit, length)
    return list(bills[skip:][:take])