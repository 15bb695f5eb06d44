"""Thin document-store layer over MongoDB collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pymongo import MongoClient

from ledgerdesk.outstanding_models import OsShareSettings

logger = logging.getLogger(__name__)

SETTINGS_DB = "BMRM"
SETTINGS_COLLECTION = "OutstandingSettings"


@dataclass
class DocumentFilter:
    """A query with optional paging, projection and sorting.

    With paging on, ``offset`` counts pages: ``offset * limit`` documents are skipped.
    """

    filter: Mapping[str, Any] | None = None
    use_pagination: bool = False
    limit: int = 0
    offset: int = 0
    projection: Mapping[str, Any] | None = None
    sorting: list[tuple[str, int]] | None = None

    def find_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for a collection ``find`` call."""
        kwargs: dict[str, Any] = {"filter": dict(self.filter or {})}
        if self.use_pagination:
            kwargs["skip"] = self.offset * self.limit
            kwargs["limit"] = self.limit
        if self.projection is not None:
            kwargs["projection"] = dict(self.projection)
        if self.sorting is not None:
            kwargs["sort"] = list(self.sorting)
        return kwargs


class DocumentStore:
    """Operations on one collection; driver errors propagate to the caller."""

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    def find_documents(self, doc_filter: DocumentFilter) -> list[dict[str, Any]]:
        return [dict(doc) for doc in self.collection.find(**doc_filter.find_kwargs())]

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        inserted_id = self.collection.insert_one(document).inserted_id
        logger.info("Inserted document with id %s", inserted_id)
        return inserted_id

    def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> list[Any]:
        documents = list(documents)
        if not documents:
            return []
        ids = list(self.collection.insert_many(documents).inserted_ids)
        logger.info("Inserted %d documents", len(ids))
        return ids

    def update_one(self, filter: Mapping[str, Any], update: Mapping[str, Any]) -> int:
        """Apply ``update`` to the first match; returns the number modified."""
        return self.collection.update_one(filter, update).modified_count

    def replace_one(self, filter: Mapping[str, Any], replacement: Mapping[str, Any]) -> int:
        """Replace the first match; returns the number modified."""
        return self.collection.replace_one(filter, replacement).modified_count

    def aggregate(self, pipeline: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
        return [dict(doc) for doc in self.collection.aggregate(pipeline)]

    def distinct(self, field: str, filter: Mapping[str, Any] | None = None) -> list[Any]:
        return list(self.collection.distinct(field, dict(filter or {})))


def connect(uri: str) -> MongoClient:
    """Open a client and check the server answers; errors propagate."""
    client = MongoClient(uri)
    client.admin.command("ping")
    logger.info("Connected to MongoDB")
    return client


def get_all_settings(store: DocumentStore, company_id: str) -> list[OsShareSettings]:
    """All outstanding settings stored for a company."""
    documents = store.find_documents(DocumentFilter(filter={"CompanyId": company_id}))
    return [OsShareSettings.from_document(doc) for doc in documents]