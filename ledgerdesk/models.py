"""Shared request and settings models used across the service."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping


def clean_string(text: str | bytes) -> str:
    """Drop non-printable characters (whitespace is kept) and trim the result."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    kept = "".join(ch for ch in text if ch.isprintable() or ch.isspace())
    return kept.strip()


def parse_float_from_string(text: str | bytes) -> float:
    """Parse a float stored as text, ignoring stray control characters.

    Raises ValueError when the cleaned text is not a number.
    """
    cleaned = clean_string(text)
    try:
        return float(cleaned)
    except ValueError as exc:
        raise ValueError(f"cannot convert {cleaned!r} to float") from exc


class EmailBodyType(IntEnum):
    TEXT_BODY = 0
    HTML_BODY = 1


@dataclass
class EmailSettings:
    smtp_server: str = ""
    smtp_port: str = ""
    sender: str = ""
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    subject: str = ""
    body: str = ""
    body_type: EmailBodyType = EmailBodyType.TEXT_BODY
    signature: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any] | None) -> "EmailSettings":
        """Build settings from a stored document (keys as in the database)."""
        doc = doc or {}
        return cls(
            smtp_server=doc.get("SmtpServer") or "",
            smtp_port=doc.get("SmtpPort") or "",
            sender=doc.get("From") or "",
            to=list(doc.get("To") or []),
            cc=list(doc.get("Cc") or []),
            bcc=list(doc.get("Bcc") or []),
            subject=doc.get("Subject") or "",
            body=doc.get("Body") or "",
            body_type=EmailBodyType(doc.get("BodyType") or 0),
            signature=doc.get("Signature") or "",
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "SmtpServer": self.smtp_server,
            "SmtpPort": self.smtp_port,
            "From": self.sender,
            "To": list(self.to),
            "Cc": list(self.cc),
            "Bcc": list(self.bcc),
            "Subject": self.subject,
            "Body": self.body,
            "BodyType": int(self.body_type),
            "Signature": self.signature,
        }


@dataclass
class File:
    name: str = ""
    data: str = ""

    def content(self) -> bytes:
        """Decode the base64 payload; raises ValueError on malformed data."""
        try:
            return base64.b64decode(self.data, validate=True)
        except binascii.Error as exc:
            raise ValueError("invalid file data") from exc


@dataclass
class Pagination:
    apply: bool = False
    limit: int = 0
    offset: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Pagination":
        data = data or {}
        return cls(
            apply=bool(data.get("Apply", False)),
            limit=int(data.get("Limit") or 0),
            offset=int(data.get("Offset") or 0),
        )


@dataclass
class RequestFilter:
    batch: Pagination = field(default_factory=Pagination)
    search_text: str = ""
    search_key: str = ""
    sort_key: str = ""
    sort_order: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RequestFilter":
        data = data or {}
        return cls(
            batch=Pagination.from_dict(data.get("Batch")),
            search_text=data.get("SearchText") or "",
            search_key=data.get("SearchKey") or "",
            sort_key=data.get("SortKey") or "",
            sort_order=data.get("SortOrder") or "",
        )