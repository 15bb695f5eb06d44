"""Per-party payment behaviour summaries built from outstanding bills."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from ledgerdesk.followup_models import ActionHistory, OutstandingSummary
from ledgerdesk.outstanding_models import MetaBill

_SECONDS_PER_DAY = 24 * 60 * 60

HISTORY_ACTION = "Check Payment Status"
HISTORY_OUTCOME = "Pending"
LAST_ACTION = "Send Reminder"
LAST_OUTCOME = "Payment Pending"


def _stored_time(moment: datetime) -> datetime:
    """UTC time truncated to the millisecond precision of stored dates."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def populate_outstanding_summary(
    company_id: str,
    ledger_name: str,
    bills: Iterable[MetaBill],
    now: datetime | None = None,
) -> OutstandingSummary:
    """Summary of one party's bills: amount due, delayed share and average delay.

    A bill counts as delayed when its due date lies before ``now``.
    Raises ValueError for a bill without a bill date.
    """
    bills = list(bills)
    current = _stored_time(now if now is not None else datetime.now(timezone.utc))

    total_delayed = 0
    total_amount_due = 0.0
    total_delay_days = 0
    history: list[ActionHistory] = []

    for bill in bills:
        if bill.pending_amount is not None:
            total_amount_due += bill.pending_amount

        if bill.due_date is not None:
            due = _stored_time(bill.due_date)
            if due < current:
                total_delayed += 1
                total_delay_days += int((current - due).total_seconds() / _SECONDS_PER_DAY)

        if bill.bill_date is None:
            raise ValueError(f"bill {bill.bill_number!r} has no bill date")
        history.append(
            ActionHistory(
                action=HISTORY_ACTION,
                outcome=HISTORY_OUTCOME,
                date=_stored_time(bill.bill_date),
            )
        )

    total = len(bills)
    delay_percentage = (total_delayed / total) * 100 if total > 0 else 0.0
    average_delay = total_delay_days // total_delayed if total_delayed > 0 else 0

    return OutstandingSummary(
        client_id=company_id,
        ledger_name=ledger_name,
        total_transactions=total,
        total_delayed=total_delayed,
        delay_percentage=delay_percentage,
        amount_due=total_amount_due,
        average_delay_days=average_delay,
        last_action=LAST_ACTION,
        last_outcome=LAST_OUTCOME,
        action_history=history,
    )


def calculate_outstanding_summary(
    company_id: str,
    bills: Iterable[MetaBill],
    now: datetime | None = None,
) -> list[OutstandingSummary]:
    """One summary per party, in the order each party's first bill appears."""
    now = now if now is not None else datetime.now(timezone.utc)
    grouped: dict[str, list[MetaBill]] = {}
    for bill in bills:
        grouped.setdefault(bill.party_name, []).append(bill)
    return [
        populate_outstanding_summary(company_id, party, party_bills, now)
        for party, party_bills in grouped.items()
    ]