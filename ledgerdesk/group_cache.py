"""In-memory tree of ledger groups, kept per company."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

ROOT_GROUP = "Primary"
_COMPANY_ID_LENGTH = 36


@dataclass
class Group:
    guid: str
    name: str
    parent: str


@dataclass(eq=False)
class GroupNode:
    value: str
    parent: "GroupNode | None" = None
    children: list["GroupNode"] = field(default_factory=list)


class GroupCacheManager:
    """Holds one group tree per company, rooted at the primary group."""

    def __init__(self) -> None:
        self._root_by_company_id: dict[str, GroupNode] = {}

    def find_node(self, node: GroupNode, value: str) -> GroupNode | None:
        """Depth-first search for the node holding ``value``."""
        if node.value == value:
            return node
        for child in node.children:
            found = self.find_node(child, value)
            if found is not None:
                return found
        return None

    def search_children_by_parent(self, node: GroupNode) -> list[str]:
        """All descendant names of ``node`` in depth-first order."""
        names: list[str] = []
        for child in node.children:
            names.append(child.value)
            names.extend(self.search_children_by_parent(child))
        return names

    def build(self, company_id: str, groups: Iterable[Group]) -> None:
        """Build and store the group tree of one company.

        Raises ValueError when a group names a parent that is not among the groups.
        """
        groups = list(groups)
        node_by_name = {group.name: GroupNode(value=group.name) for group in groups}
        root = GroupNode(value=ROOT_GROUP)

        for group in groups:
            if group.parent.casefold() == ROOT_GROUP.casefold():
                parent = root
            else:
                try:
                    parent = node_by_name[group.parent]
                except KeyError:
                    raise ValueError(
                        f"group {group.name!r} refers to unknown parent {group.parent!r}"
                    ) from None
            child = node_by_name[group.name]
            child.parent = parent
            if not any(existing.value == child.value for existing in parent.children):
                parent.children.append(child)

        self._root_by_company_id[company_id] = root

    def get_children_names(self, company_id: str, parent: str) -> list[str]:
        """``parent`` followed by the names of all its descendants, or [] if unknown."""
        root = self._root_by_company_id.get(company_id)
        if root is None:
            return []
        node = self.find_node(root, parent)
        if node is None:
            return []
        return [parent, *self.search_children_by_parent(node)]

    def build_from_documents(self, documents: Iterable[Mapping[str, Any]]) -> None:
        """Build trees for every company found in stored group documents.

        The company id is the first 36 characters of each group's GUID;
        documents without a GUID are skipped.
        """
        groups_by_company: dict[str, list[Group]] = defaultdict(list)
        for doc in documents:
            guid = doc.get("GUID")
            if guid is None:
                continue
            group = Group(guid=str(guid), name=str(doc["Name"]), parent=str(doc["Parent"]))
            groups_by_company[group.guid[:_COMPANY_ID_LENGTH]].append(group)

        for company_id, groups in groups_by_company.items():
            logger.info("Building group cache for %s", company_id)
            self.build(company_id, groups)
            logger.info("Group cache built for %s", company_id)