"""Models for outstanding bills, ledgers, locations and overviews."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Mapping

from ledgerdesk.models import EmailSettings, RequestFilter, parse_float_from_string


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    return parse_float_from_string(str(value))


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


class DueDayFilter(IntEnum):
    ALL_BILLS = 0
    PENDING_BILLS = 1
    DUE_BILLS = 2
    OVER_DUE_BILLS = 3


class ReportType(IntEnum):
    PARTY_WISE = 0
    BILL_WISE = 1


class LocationReportType(str, Enum):
    STATE = "State"
    REGION = "Region"
    DISTRICT = "District"
    PINCODE = "Pincode"


class ReminderInterval(IntEnum):
    DAILY = 0
    WEEKLY = 1
    MONTHLY = 2
    DAY_WISE = 3


class DueType(str, Enum):
    NO_DUE = "noDue"
    DUE = "due"
    OVER_DUE = "overDue"


@dataclass
class OsReportFilter:
    party_name: str = ""
    search_text: str = ""
    limit: int = 0
    offset: int = 0
    groups: list[str] = field(default_factory=list)
    due_filter: DueDayFilter = DueDayFilter.ALL_BILLS
    search_key: str = ""
    sort_key: str = ""
    sort_order: str = ""
    report_on_type: ReportType = ReportType.PARTY_WISE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OsReportFilter":
        data = data or {}
        return cls(
            party_name=data.get("PartyName") or "",
            search_text=data.get("SearchText") or "",
            limit=int(data.get("Limit") or 0),
            offset=int(data.get("Offset") or 0),
            groups=list(data.get("Groups") or []),
            due_filter=DueDayFilter(data.get("DueFilter") or 0),
            search_key=data.get("SearchKey") or "",
            sort_key=data.get("SortKey") or "",
            sort_order=data.get("SortOrder") or "",
            report_on_type=ReportType(data.get("ReportOnType") or 0),
        )


@dataclass
class LocationOverview:
    location_name: str = ""
    opening_amount: float = 0.0
    closing_amount: float = 0.0


@dataclass
class MetaBill:
    bill_number: str = ""
    party_name: str = ""
    parent_group: str | None = None
    pending_amount: float | None = None
    opening_amount: float | None = None
    bill_date: datetime | None = None
    due_date: datetime | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "MetaBill":
        """Build from a projected bill document; amounts may be stored as text."""
        return cls(
            bill_number=doc.get("Name") or "",
            party_name=doc.get("LedgerName") or "",
            parent_group=_optional_str(doc.get("LedgerGroupName")),
            pending_amount=_optional_float(doc.get("Amount")),
            opening_amount=_optional_float(doc.get("OpeningAmount")),
            bill_date=doc.get("BillDate"),
            due_date=doc.get("DueDate"),
        )


@dataclass
class Bill:
    ledger_name: str = ""
    ledger_group_name: str = ""
    bill_name: str = ""
    bill_date: str = ""
    due_date: str = ""
    delay_days: int = 0

    opening_amount: float = 0.0
    closing_amount: float = 0.0
    amount: float = 0.0
    due_amount: float = 0.0
    over_due_amount: float = 0.0

    pending_percentage: float = 0.0
    paid_percentage: float = 0.0

    amount_str: str = ""
    opening_amount_str: str = ""
    closing_amount_str: str = ""
    over_due_amount_str: str = ""


@dataclass
class OsShareSettings:
    company_id: str = ""
    cut_off_date: str = ""
    template_name: str | None = None
    due_days: int = 0
    over_due_days: int = 0
    send_all_due: bool = False
    send_due_only: bool = False
    send_over_due_only: bool = False
    email_setting: EmailSettings = field(default_factory=EmailSettings)
    auto_reminder_interval: ReminderInterval = ReminderInterval.DAILY
    reminder_interval_days: int = 0
    id: Any = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "OsShareSettings":
        return cls(
            id=doc.get("_id"),
            company_id=doc.get("CompanyId") or "",
            cut_off_date=doc.get("CutOffDate") or "",
            template_name=_optional_str(doc.get("TemplateName")),
            due_days=int(doc.get("DueDays") or 0),
            over_due_days=int(doc.get("OverDueDays") or 0),
            send_all_due=bool(doc.get("SendAllDue", False)),
            send_due_only=bool(doc.get("SendDueOnly", False)),
            send_over_due_only=bool(doc.get("SendOverDueOnly", False)),
            email_setting=EmailSettings.from_document(doc.get("EmailSetting")),
            auto_reminder_interval=ReminderInterval(doc.get("AutoReminderInterval") or 0),
            reminder_interval_days=int(doc.get("ReminderIntervalDays") or 0),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {}
        if self.id is not None:
            doc["_id"] = self.id
        doc.update(
            {
                "CompanyId": self.company_id,
                "CutOffDate": self.cut_off_date,
                "TemplateName": self.template_name,
                "DueDays": self.due_days,
                "OverDueDays": self.over_due_days,
                "SendAllDue": self.send_all_due,
                "SendDueOnly": self.send_due_only,
                "SendOverDueOnly": self.send_over_due_only,
                "EmailSetting": self.email_setting.to_document(),
                "AutoReminderInterval": int(self.auto_reminder_interval),
                "ReminderIntervalDays": self.reminder_interval_days,
            }
        )
        return doc


@dataclass
class PartyOverview:
    party_name: str = ""
    bill_number: str = ""
    total_bills: int = 0
    total_opening: float = 0.0
    total_closing: float = 0.0


@dataclass
class MetaLedger:
    name: str = ""
    group: str = ""
    address: str | None = None
    state: str | None = None
    pin_code: str | None = None
    email: str | None = None
    email_cc: str | None = None
    credit_period: str | None = None
    credit_limit: str | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "MetaLedger":
        return cls(
            name=doc.get("Name") or "",
            group=doc.get("Group") or "",
            address=_optional_str(doc.get("Address")),
            state=_optional_str(doc.get("State")),
            pin_code=_optional_str(doc.get("PinCode")),
            email=_optional_str(doc.get("Email")),
            email_cc=_optional_str(doc.get("EmailCc")),
            credit_period=_optional_str(doc.get("CreditPeriod")),
            credit_limit=_optional_str(doc.get("CreditLimit")),
        )


_DSP_FIELDS = (
    ("circle_name", "CircleName"),
    ("region_name", "RegionName"),
    ("division_name", "DivisionName"),
    ("office_name", "OfficeName"),
    ("pincode", "Pincode"),
    ("office_type", "OfficeType"),
    ("delivery", "Delivery"),
    ("district", "District"),
    ("state_name", "StateName"),
    ("latitude", "Latitude"),
    ("longitude", "Longitude"),
)


@dataclass
class DSP:
    """A postal office location entry."""

    circle_name: str = ""
    region_name: str = ""
    division_name: str = ""
    office_name: str = ""
    pincode: str = ""
    office_type: str = ""
    delivery: str = ""
    district: str = ""
    state_name: str = ""
    latitude: str = ""
    longitude: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "DSP":
        return cls(**{attr: doc.get(key) or "" for attr, key in _DSP_FIELDS})

    def to_document(self) -> dict[str, str]:
        return {key: getattr(self, attr) for attr, key in _DSP_FIELDS}


@dataclass
class OverviewFilter:
    filter: RequestFilter = field(default_factory=RequestFilter)
    deduct_advance_payment: bool = False
    is_debit: bool = False
    due_type: DueType | None = None
    groups: list[str] = field(default_factory=list)
    parties: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OverviewFilter":
        data = data or {}
        due_type = data.get("DueType")
        return cls(
            filter=RequestFilter.from_dict(data.get("Filter")),
            deduct_advance_payment=bool(data.get("DeductAdvancePayment", False)),
            is_debit=bool(data.get("IsDebit", False)),
            due_type=DueType(due_type) if due_type else None,
            groups=list(data.get("Groups") or []),
            parties=list(data.get("Parties") or []),
        )


@dataclass
class OverviewBill:
    bill_number: str = ""
    ledger_name: str = ""
    ledger_group_name: str | None = None
    opening_balance: float | None = None
    closing_balance: float | None = None
    bill_date: datetime | None = None
    due_date: datetime | None = None
    is_advance: bool | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "OverviewBill":
        is_advance = doc.get("IsAdvance")
        return cls(
            bill_number=doc.get("Name") or "",
            ledger_name=doc.get("LedgerName") or "",
            ledger_group_name=_optional_str(doc.get("LedgerGroupName")),
            opening_balance=_optional_float(doc.get("OpeningBalance")),
            closing_balance=_optional_float(doc.get("ClosingBalance")),
            bill_date=doc.get("BillDate"),
            due_date=doc.get("DueDate"),
            is_advance=None if is_advance is None else bool(is_advance),
        )


@dataclass
class OutstandingOverview:
    party_name: str = ""
    ledger_group: str = ""
    credit_limit: str | None = None
    credit_days: str | None = None
    total_bills: int = 0
    bill_number: str | None = None
    bill_date: datetime | None = None
    due_date: datetime | None = None
    delay_days: int | None = None
    opening_amount: float = 0.0
    closing_amount: float = 0.0
    due_amount: float = 0.0
    over_due_amount: float = 0.0
    received_percentage: float | None = None
    pending_percentage: float | None = None
    is_advance: bool | None = None
    bills: list["OutstandingOverview"] | None = None


@dataclass
class AgingOverview:
    party_name: str = ""
    ledger_group: str = ""
    credit_limit: str | None = None
    credit_days: str | None = None
    total_bills: int = 0
    bill_number: str | None = None
    bill_date: datetime | None = None
    due_date: datetime | None = None
    delay_days: int | None = None
    opening_amount: float = 0.0
    closing_amount: float = 0.0
    above30: float = 0.0
    above60: float = 0.0
    above90: float = 0.0
    above120: float = 0.0
    is_advance: bool | None = None
    bills: list["AgingOverview"] | None = None


@dataclass
class PartySummary:
    """Bills of one party with their total."""

    party_name: str = ""
    total_amount: float = 0.0
    bills: list[OverviewBill] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "party_name": self.party_name,
            "total_amount": self.total_amount,
            "bills": list(self.bills),
        }


@dataclass
class DurationSummary:
    """Parties and their bills grouped under one duration key."""

    duration_key: str = ""
    total_amount: float = 0.0
    parties: list[PartySummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_key": self.duration_key,
            "total_amount": self.total_amount,
            "parties": [party.to_dict() for party in self.parties],
        }