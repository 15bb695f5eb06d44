"""Follow-up status calibration and follow-up reports."""

from __future__ import annotations

import dataclasses
from collections import Counter
from collections.abc import Iterable, Mapping

from ledgerdesk.followup_models import (
    ContactPerson,
    FollowUp,
    FollowUpBill,
    FollowUpHistory,
    FollowUpOverview,
    FollowUpStatus,
)

SELF_NAME = "Self"
OTHER_NAME = "Other"


def calibrate_status(followup: FollowUp) -> FollowUp:
    """Copy of ``followup`` whose status is the one most of its bills carry.

    Ties go to the status seen first; a follow-up without bills is pending.
    """
    counts = Counter(bill.status for bill in followup.follow_up_bills or [])
    status = counts.most_common(1)[0][0] if counts else FollowUpStatus.PENDING
    return dataclasses.replace(followup, status=status)


def status_counts(bills: Iterable[FollowUpBill]) -> tuple[int, int, int]:
    """Numbers of pending, scheduled and completed bills.

    Any status other than scheduled or completed counts as pending.
    """
    pending = scheduled = completed = 0
    for bill in bills:
        if bill.status == FollowUpStatus.COMPLETED:
            completed += 1
        elif bill.status == FollowUpStatus.SCHEDULED:
            scheduled += 1
        else:
            pending += 1
    return pending, scheduled, completed


def follow_up_overview(name: str, followups: Iterable[FollowUp]) -> FollowUpOverview:
    """Count follow-ups by the status most of their bills are in.

    Ties favour pending over scheduled, and scheduled over completed.
    """
    followups = list(followups)
    overview = FollowUpOverview(
        name=name,
        total_count=len(followups),
        pending_count=0,
        scheduled_count=0,
        complete_count=0,
    )
    for followup in followups:
        pending, scheduled, completed = status_counts(followup.follow_up_bills or [])
        if pending >= scheduled and pending >= completed:
            overview.pending_count += 1
        elif scheduled >= pending and scheduled >= completed:
            overview.scheduled_count += 1
        else:
            overview.complete_count += 1
    return overview


def _group_by(followups: Iterable[FollowUp], key) -> dict:
    grouped: dict = {}
    for followup in followups:
        grouped.setdefault(key(followup), []).append(followup)
    return grouped


def _person_name(person_id: int, user_names: Mapping[int, str], current_user_id: int) -> str:
    if person_id == current_user_id:
        return SELF_NAME
    return user_names.get(person_id, OTHER_NAME)


def team_report(
    followups: Iterable[FollowUp],
    user_names: Mapping[int, str],
    current_user_id: int,
) -> list[FollowUpOverview]:
    """One overview per person in charge, in order of first appearance.

    The current user is named "Self"; users not in ``user_names`` are "Other".
    """
    grouped = _group_by(followups, lambda f: f.person_in_charge_id)
    return [
        follow_up_overview(_person_name(person_id, user_names, current_user_id), values)
        for person_id, values in grouped.items()
    ]


def party_report(followups: Iterable[FollowUp]) -> list[FollowUpOverview]:
    """One overview per party, in order of first appearance."""
    grouped = _group_by(followups, lambda f: f.party_name)
    return [follow_up_overview(party, values) for party, values in grouped.items()]


def history_entry(
    followup: FollowUp,
    contact: ContactPerson | None,
    person_in_charge: str,
) -> FollowUpHistory:
    """History row of one follow-up with its contact and the name of whoever handles it.

    Raises ValueError when the follow-up lacks its creation or update time.
    """
    if followup.created is None or followup.last_updated is None:
        raise ValueError(f"follow-up {followup.follow_up_id!r} has no creation or update time")

    bills = list(followup.follow_up_bills or [])
    pending = scheduled = completed = 0
    for bill in bills:
        if bill.status == FollowUpStatus.PENDING:
            pending += 1
        elif bill.status == FollowUpStatus.SCHEDULED:
            scheduled += 1
        else:
            completed += 1

    entry = FollowUpHistory(
        party_name=followup.party_name,
        creation_date=followup.created,
        updation_date=followup.last_updated,
        next_follow_up_date=followup.next_follow_up_date,
        person_in_charge=person_in_charge,
        person_in_charge_id=followup.person_in_charge_id,
        total_count=len(bills),
        pending_count=pending,
        scheduled_count=scheduled,
        complete_count=completed,
    )
    if contact is not None:
        entry.poc_name = contact.name
        entry.poc_mobile = contact.phone_no
        entry.poc_email = contact.email
    return entry