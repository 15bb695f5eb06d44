"""Collection prompts suggested to users for pending bills."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal

from ledgerdesk.followup_models import Action, OutstandingSummary, UserPrompt
from ledgerdesk.outstanding_models import MetaBill

CURRENCY_SYMBOL = "₹"

SEND_REMINDER_ACTION = "send_reminder"
TEAM_FOLLOW_UP_ACTION = "team_follow_up"
IGNORE_ACTION = "ignore"

COLLECTION_ACTIONS = (
    Action(title="Send Reminder", code=SEND_REMINDER_ACTION),
    Action(title="Notify Team To Follow-Up", code=TEAM_FOLLOW_UP_ACTION),
    Action(title="Ignore", code=IGNORE_ACTION),
)

_SECONDS_PER_DAY = 24 * 60 * 60


def format_money(amount: float) -> str:
    """Rupee amount with thousands separators and two decimals, e.g. ₹1,234.50."""
    text = f"{abs(amount):,.2f}"
    if amount < 0:
        return f"-{CURRENCY_SYMBOL}{text}"
    return f"{CURRENCY_SYMBOL}{text}"


def _plain_number(value: float | int) -> str:
    """Shortest text of a number: integral floats without a fraction, large ones in e-notation."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if -4 <= exponent < 21:
        return format(number, "f")
    sign, digits, _ = number.as_tuple()
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    exp_sign = "+" if exponent >= 0 else "-"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exponent):02d}"


def _summary_profile(summaries: Iterable[OutstandingSummary]) -> str:
    text = "Summary\n"
    for summary in summaries:
        text += (
            f"\nTotal Transactions: {_plain_number(summary.total_transactions)}\n"
            f" Average Delay Days: {_plain_number(summary.average_delay_days)}\n"
            f"Delay Percentage: {_plain_number(summary.delay_percentage)}\n"
        )
    return text


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def collection_prompts(
    bills: Iterable[MetaBill],
    summaries_by_party: Mapping[str, Iterable[OutstandingSummary]],
    party_wise: bool,
    now: datetime | None = None,
) -> list[UserPrompt]:
    """Prompts asking the user to act on pending bills.

    With ``party_wise`` there is one prompt per party for its total; otherwise
    one per bill, mentioning the delay when the bill is past due. Parties come
    in the order of their first bill. Raises ValueError for a bill without an
    opening amount or bill date.
    """
    current = _as_utc(now if now is not None else datetime.now(timezone.utc))

    grouped: dict[str, list[MetaBill]] = {}
    for bill in bills:
        grouped.setdefault(bill.party_name, []).append(bill)

    prompts: list[UserPrompt] = []
    for party_name, party_bills in grouped.items():
        profile = _summary_profile(summaries_by_party.get(party_name, ()))
        total_amount = 0.0
        for bill in party_bills:
            if bill.opening_amount is None:
                raise ValueError(f"bill {bill.bill_number!r} has no opening amount")
            if bill.bill_date is None:
                raise ValueError(f"bill {bill.bill_number!r} has no bill date")
            amount = bill.pending_amount if bill.pending_amount is not None else bill.opening_amount
            total_amount += amount
            if party_wise:
                continue

            amount_str = format_money(amount)
            due = _as_utc(bill.due_date if bill.due_date is not None else bill.bill_date)
            days = int((current - due).total_seconds() / _SECONDS_PER_DAY)
            message = (
                f"{party_name} has pending amount of {amount_str} "
                f"on bill number: {bill.bill_number} "
            )
            if days > 0:
                message += f" with a delay of {days} days"
            prompts.append(
                UserPrompt(
                    message=message,
                    summary_profile=profile,
                    actions=list(COLLECTION_ACTIONS),
                    party_name=party_name,
                    bill_number=bill.bill_number,
                    amount_str=amount_str,
                )
            )
        if party_wise:
            total_str = format_money(total_amount)
            prompts.append(
                UserPrompt(
                    message=f"{party_name} has pending amount of {total_str}",
                    summary_profile=profile,
                    actions=list(COLLECTION_ACTIONS),
                    party_name=party_name,
                    amount_str=total_str,
                )
            )
    return prompts