# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Member data access (in-memory).
Encapsulates all read/write operations on the flat member collection.
NO business rules here — pure CRUD.
"""

from typing import Any, Optional

from orgchart.models.domain import ROLE_RANK


def sort_key(member: dict[str, Any]) -> tuple[int, str]:
    """Role rank first, then display name."""
    return ROLE_RANK.get(member["role"], len(ROLE_RANK)), member["full_name"] or ""


class MemberRepository:
    """In-memory member storage."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}

    def ensure_schema(self) -> None:
        """Nothing to create for the in-memory store."""

    def verify_connection(self) -> None:
        """Always reachable."""

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return sorted(self._store.values(), key=sort_key)

    def get_by_id(self, member_id: str) -> Optional[dict[str, Any]]:
        return self._store.get(member_id)

    def exists(self, member_id: str) -> bool:
        return member_id in self._store

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def save(self, member: dict[str, Any]) -> None:
        self._store[member["id"]] = member

    def update(self, member_id: str, fields: dict[str, Any]) -> Optional[dict[str, Any]]:
        member = self._store.get(member_id)
        if member is None:
            return None
        member.update(fields)
        return member

    def delete(self, member_id: str) -> Optional[dict[str, Any]]:
        """Remove a member; its direct reports lose their manager."""
        member = self._store.pop(member_id, None)
        if member is not None:
            for other in self._store.values():
                if other.get("reports_to") == member_id:
                    other["reports_to"] = None
        return member

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()
