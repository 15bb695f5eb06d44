"""Models for follow-ups, contact persons, actionables and summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Mapping


class FollowUpStatus(IntEnum):
    PENDING = 0
    SCHEDULED = 1
    COMPLETED = 2


def follow_up_status_mappings() -> dict[str, int]:
    """Status names and their numeric codes, as shown to clients."""
    return {"Pending": 0, "Scheduled": 1, "Completed": 2}


@dataclass
class ContactPerson:
    person_id: str = ""
    company_id: str = ""
    name: str = ""
    party_name: str = ""
    email: str = ""
    phone_no: str = ""
    id: Any = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ContactPerson":
        return cls(
            id=doc.get("_id"),
            person_id=doc.get("PersonId") or "",
            company_id=doc.get("CompanyId") or "",
            name=doc.get("Name") or "",
            party_name=doc.get("PartyName") or "",
            email=doc.get("Email") or "",
            phone_no=doc.get("PhoneNo") or "",
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {} if self.id is None else {"_id": self.id}
        doc.update(
            {
                "PersonId": self.person_id,
                "CompanyId": self.company_id,
                "Name": self.name,
                "PartyName": self.party_name,
                "Email": self.email,
                "PhoneNo": self.phone_no,
            }
        )
        return doc


@dataclass
class FollowUpBill:
    bill_id: str = ""
    status: FollowUpStatus = FollowUpStatus.PENDING

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "FollowUpBill":
        return cls(
            bill_id=doc.get("BillId") or "",
            status=FollowUpStatus(doc.get("Status") or 0),
        )

    def to_document(self) -> dict[str, Any]:
        return {"BillId": self.bill_id, "Status": int(self.status)}


@dataclass
class FollowUp:
    company_id: str = ""
    follow_up_id: str = ""
    contact_person_id: str = ""
    person_in_charge_id: int = 0
    party_name: str = ""
    description: str = ""
    status: FollowUpStatus = FollowUpStatus.PENDING
    follow_up_bills: list[FollowUpBill] = field(default_factory=list)
    created: datetime | None = None
    last_updated: datetime | None = None
    ref_prev_follow_up_id: str | None = None
    next_follow_up_date: datetime | None = None
    id: Any = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "FollowUp":
        return cls(
            id=doc.get("_id"),
            created=doc.get("CreateDate"),
            last_updated=doc.get("LastUpdated"),
            company_id=doc.get("CompanyId") or "",
            ref_prev_follow_up_id=doc.get("RefPrevFollowUpId"),
            follow_up_id=doc.get("FollowUpId") or "",
            contact_person_id=doc.get("ContactPersonId") or "",
            person_in_charge_id=int(doc.get("PersonInChargeId") or 0),
            party_name=doc.get("PartyName") or "",
            description=doc.get("Description") or "",
            status=FollowUpStatus(doc.get("Status") or 0),
            follow_up_bills=[FollowUpBill.from_document(b) for b in doc.get("FollowUpBills") or []],
            next_follow_up_date=doc.get("NextFollowUpDate"),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {} if self.id is None else {"_id": self.id}
        doc.update(
            {
                "CreateDate": self.created,
                "LastUpdated": self.last_updated,
                "CompanyId": self.company_id,
                "RefPrevFollowUpId": self.ref_prev_follow_up_id,
                "FollowUpId": self.follow_up_id,
                "ContactPersonId": self.contact_person_id,
                "PersonInChargeId": self.person_in_charge_id,
                "PartyName": self.party_name,
                "Description": self.description,
                "Status": int(self.status),
                "FollowUpBills": [bill.to_document() for bill in self.follow_up_bills],
                "NextFollowUpDate": self.next_follow_up_date,
            }
        )
        return doc


@dataclass
class FollowUpHistory:
    party_name: str = ""
    creation_date: datetime | None = None
    updation_date: datetime | None = None
    next_follow_up_date: datetime | None = None
    person_in_charge: str = ""
    person_in_charge_id: int = 0
    poc_name: str = ""
    poc_email: str = ""
    poc_mobile: str = ""
    description: str = ""
    follow_up_bills: list[FollowUpBill] = field(default_factory=list)
    total_count: int = 0
    pending_count: int = 0
    scheduled_count: int = 0
    complete_count: int = 0


@dataclass
class FollowUpOverview:
    name: str = ""
    amount: float = 0.0
    total_count: int = 0
    pending_count: int = 0
    scheduled_count: int = 0
    complete_count: int = 0


class ActionableStatus(IntEnum):
    PENDING = 0
    DONE = 1
    CANCELLED = 2


@dataclass
class Actionable:
    guid: str = ""
    company_id: str = ""
    title: str = ""
    description: str = ""
    assigned_to: int = 0
    created_by: int = 0
    created_on: datetime | None = None
    status: ActionableStatus = ActionableStatus.PENDING
    id: Any = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Actionable":
        return cls(
            id=doc.get("_id"),
            guid=doc.get("guid") or "",
            company_id=doc.get("company_id") or "",
            title=doc.get("title") or "",
            description=doc.get("description") or "",
            assigned_to=int(doc.get("assigned_to") or 0),
            created_by=int(doc.get("created_by") or 0),
            created_on=doc.get("created_on"),
            status=ActionableStatus(doc.get("status") or 0),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {} if self.id is None else {"_id": self.id}
        doc.update(
            {
                "guid": self.guid,
                "company_id": self.company_id,
                "title": self.title,
                "description": self.description,
                "assigned_to": self.assigned_to,
                "created_by": self.created_by,
                "created_on": self.created_on,
                "status": int(self.status),
            }
        )
        return doc


@dataclass
class Action:
    title: str = ""
    code: str = ""


@dataclass
class UserPrompt:
    message: str = ""
    suggestion: str = ""
    summary_profile: str = ""
    actions: list[Action] = field(default_factory=list)
    party_name: str | None = None
    bill_number: str | None = None
    amount_str: str | None = None


@dataclass
class ActionHistory:
    action: str = ""
    outcome: str = ""
    date: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ActionHistory":
        return cls(
            action=doc.get("action") or "",
            outcome=doc.get("outcome") or "",
            date=doc.get("date"),
        )

    def to_document(self) -> dict[str, Any]:
        return {"action": self.action, "outcome": self.outcome, "date": self.date}


@dataclass
class OutstandingSummary:
    client_id: str = ""
    ledger_name: str = ""
    total_transactions: int = 0
    total_delayed: int = 0
    delay_percentage: float = 0.0
    amount_due: float = 0.0
    average_delay_days: int = 0
    last_action: str = ""
    last_outcome: str = ""
    action_history: list[ActionHistory] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "OutstandingSummary":
        return cls(
            client_id=doc.get("client_id") or "",
            ledger_name=doc.get("ledger_name") or "",
            total_transactions=int(doc.get("total_transactions") or 0),
            total_delayed=int(doc.get("total_delayed") or 0),
            delay_percentage=float(doc.get("delay_percentage") or 0.0),
            amount_due=float(doc.get("amount_due") or 0.0),
            average_delay_days=int(doc.get("average_delay_days") or 0),
            last_action=doc.get("last_action") or "",
            last_outcome=doc.get("last_outcome") or "",
            action_history=[ActionHistory.from_document(a) for a in doc.get("action_history") or []],
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "client_id": self.client_id,
            "ledger_name": self.ledger_name,
            "total_transactions": self.total_transactions,
            "total_delayed": self.total_delayed,
            "delay_percentage": self.delay_percentage,
            "amount_due": self.amount_due,
            "average_delay_days": self.average_delay_days,
            "last_action": self.last_action,
            "last_outcome": self.last_outcome,
            "action_history": [a.to_document() for a in self.action_history],
        }