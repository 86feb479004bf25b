# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Org chart management — members, tree derivation, and reparenting.
Coordinates repository writes with tree validation, metrics, history,
and notifications.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import ValidationError

from orgchart.core.config import settings
from orgchart.core.logging import get_logger
from orgchart.metrics.prometheus import (
    MEMBERS_CREATED,
    MEMBERS_GAUGE,
    REPARENT_REJECTIONS,
    REPARENTS_TOTAL,
    TREE_BUILDS,
    UNASSIGNED_MEMBERS,
)
from orgchart.models.domain import ROLE_RANK, Member, RejectionReason, ReparentCheck
from orgchart.repositories.history_repository import HistoryRepository
from orgchart.repositories.member_repository import MemberRepository
from orgchart.repositories.sql_member_repository import SqlMemberRepository
from orgchart.services.notification_client import NotificationClient
from orgchart.services.org_tree import OrgTree, build_tree, validate_reparent

logger = get_logger(__name__)

MemberStore = Union[MemberRepository, SqlMemberRepository]

# Display attributes that may be changed but never cleared.
NON_NULLABLE_FIELDS = ("full_name", "email", "role", "is_active")


class ReparentRejected(ValueError):
    """Raised when a reparent move fails validation."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class OrgChartService:
    """Business logic for the org chart."""

    def __init__(
        self,
        member_repo: MemberStore,
        history_repo: HistoryRepository,
        notification_client: NotificationClient,
    ) -> None:
        self._members = member_repo
        self._history = history_repo
        self._notifications = notification_client

    # ── Member queries ──

    def list_members(
        self,
        role: str | None = None,
        active_only: bool = False,
    ) -> list[dict[str, Any]]:
        members = self._members.get_all()
        if role:
            members = [m for m in members if m["role"] == role]
        if active_only:
            members = [m for m in members if m["is_active"]]
        return members

    def get_member(self, member_id: str) -> dict[str, Any]:
        member = self._members.get_by_id(member_id)
        if member is None:
            raise KeyError(f"No member found with id '{member_id}'")
        return member

    def get_direct_reports(self, member_id: str) -> list[dict[str, Any]]:
        self.get_member(member_id)
        return [m for m in self._members.get_all() if m["reports_to"] == member_id]

    def get_chain_of_command(self, member_id: str) -> list[dict[str, Any]]:
        """Managers above a member, nearest first. Stops on a repeated id."""
        member = self.get_member(member_id)
        by_id = {m["id"]: m for m in self._members.get_all()}
        chain: list[dict[str, Any]] = []
        seen = {member_id}
        current = member.get("reports_to")
        while current is not None and current in by_id and current not in seen:
            seen.add(current)
            chain.append(by_id[current])
            current = by_id[current].get("reports_to")
        return chain

    # ── Member commands ──

    def create_member(
        self,
        full_name: str,
        email: str,
        role: str,
        reports_to: str | None = None,
        member_id: str | None = None,
        **attributes: Any,
    ) -> dict[str, Any]:
        """Create a member. Raises ValueError on duplicate id or unknown manager."""
        member_id = member_id or str(uuid.uuid4())
        if self._members.exists(member_id):
            raise ValueError(f"Member '{member_id}' already exists")
        if reports_to is not None and not self._members.exists(reports_to):
            raise ValueError(f"Manager '{reports_to}' does not exist")

        record: dict[str, Any] = {
            "id": member_id,
            "full_name": full_name,
            "email": email,
            "role": role,
            "reports_to": reports_to,
            "is_active": attributes.get("is_active", True),
            "job_role": attributes.get("job_role"),
            "department": attributes.get("department"),
            "employment_type": attributes.get("employment_type"),
            "avatar_url": attributes.get("avatar_url"),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "updated_at": None,
        }
        self._members.save(record)

        MEMBERS_CREATED.labels(role=role).inc()
        MEMBERS_GAUGE.set(self._members.count())
        self._history.record_event(
            "member_created",
            member_id,
            {"role": role, "reports_to": reports_to},
        )
        logger.info(
            "Member created: id=%s, role=%s, reports_to=%s", member_id, role, reports_to,
            extra={"member_id": member_id},
        )
        return record

    def update_member(self, member_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Partially update display attributes. Moves go through reparent()."""
        if "reports_to" in changes or "id" in changes:
            raise ValueError("Use the reparent operation to change reports_to")
        cleared = [k for k in NON_NULLABLE_FIELDS if k in changes and changes[k] is None]
        if cleared:
            raise ValueError(f"Fields can't be cleared: {', '.join(cleared)}")
        member = self.get_member(member_id)
        changed = {k: v for k, v in changes.items() if member.get(k) != v}
        if not changed:
            return member

        changed["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = self._members.update(member_id, changed)
        self._history.record_event(
            "member_updated",
            member_id,
            {"fields": sorted(k for k in changed if k != "updated_at")},
        )
        logger.info(
            "Member updated: id=%s, fields=%s", member_id, list(changed.keys()),
            extra={"member_id": member_id},
        )
        return updated

    def delete_member(self, member_id: str) -> dict[str, Any]:
        """Delete a member; its direct reports become unassigned. Raises KeyError."""
        orphaned = [m["id"] for m in self.get_direct_reports(member_id)]
        self._members.delete(member_id)

        MEMBERS_GAUGE.set(self._members.count())
        self._history.record_event("member_deleted", member_id, {"orphaned": orphaned})
        logger.info(
            "Member deleted: id=%s, orphaned=%d", member_id, len(orphaned),
            extra={"member_id": member_id},
        )
        return {"status": "deleted", "id": member_id, "orphaned_reports": orphaned}

    # ── Org tree ──

    def _snapshot(self) -> list[Member]:
        """
        Store rows as domain members. The store may hold rows written by
        other tools, so a row that fails validation is still taken as-is
        (an unknown role is simply never the top level) and logged.
        """
        members: list[Member] = []
        for row in self._members.get_all():
            fields = {k: v for k, v in row.items() if k in Member.model_fields}
            try:
                members.append(Member(**fields))
            except ValidationError as e:
                logger.warning(
                    "Member row failed validation, using it unchecked: id=%s, errors=%d",
                    row.get("id"), e.error_count(),
                    extra={"member_id": row.get("id")},
                )
                members.append(Member.model_construct(**fields))
        return members

    def _build(self, members: list[Member]) -> Optional[OrgTree]:
        tree = build_tree(members, top_level_role=settings.TOP_LEVEL_ROLE)
        TREE_BUILDS.inc()
        UNASSIGNED_MEMBERS.set(len(tree.unassigned) if tree else 0)
        return tree

    def get_org_tree(self) -> dict[str, Any]:
        """Derive the org tree from the current store snapshot."""
        members = self._snapshot()
        tree = self._build(members)
        if tree is None:
            return {
                "root": None,
                "unassigned": [],
                "total_members": 0,
                "in_tree": 0,
                "depth": 0,
            }
        if tree.unassigned:
            logger.warning(
                "Org tree has %d unassigned members: %s",
                len(tree.unassigned),
                [m.id for m in tree.unassigned],
            )
        return {
            "root": tree.to_dict(),
            "unassigned": [m.model_dump() for m in tree.unassigned],
            "total_members": len(members),
            "in_tree": len(tree),
            "depth": tree.depth(),
        }

    # ── Reparent ──

    def check_reparent(self, member_id: str, new_reports_to: str | None) -> ReparentCheck:
        """Dry-run validation; never writes."""
        return validate_reparent(member_id, new_reports_to, self._snapshot())

    def reparent(self, member_id: str, new_reports_to: str | None) -> dict[str, Any]:
        """Validate and persist a move. Raises ReparentRejected."""
        check = self.check_reparent(member_id, new_reports_to)
        if not check.allowed:
            REPARENTS_TOTAL.labels(outcome="rejected").inc()
            REPARENT_REJECTIONS.labels(reason=check.reason.value).inc()
            self._history.record_event(
                "reparent_rejected",
                member_id,
                {"new_reports_to": new_reports_to, "reason": check.reason.value},
            )
            logger.warning(
                "Reparent rejected: member=%s, new_reports_to=%s, reason=%s",
                member_id, new_reports_to, check.reason.value,
                extra={"member_id": member_id},
            )
            raise ReparentRejected(check.reason, check.message)

        previous = self._members.get_by_id(member_id)["reports_to"]
        updated = self._members.update(
            member_id,
            {
                "reports_to": new_reports_to,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        REPARENTS_TOTAL.labels(outcome="applied").inc()
        self._history.record_event(
            "reparented",
            member_id,
            {"old_reports_to": previous, "new_reports_to": new_reports_to},
        )
        logger.info(
            "Reparented: member=%s, old_reports_to=%s, new_reports_to=%s",
            member_id, previous, new_reports_to,
            extra={"member_id": member_id},
        )

        if new_reports_to is None:
            message = "You are now at the top level of the org chart"
        else:
            manager = self._members.get_by_id(new_reports_to)
            message = f"You now report to {manager['full_name']}"
        self._notifications.send(
            channel="email",
            recipient=updated["email"],
            message=message,
            reference_id=member_id,
        )
        return updated

    # ── Stats ──

    def get_stats(self) -> dict[str, Any]:
        """Aggregated org statistics."""
        members = self._snapshot()
        roles = {role: 0 for role in ROLE_RANK}
        for m in members:
            roles[m.role] = roles.get(m.role, 0) + 1
        tree = self._build(members)

        return {
            "total_members": len(members),
            "active_members": sum(1 for m in members if m.is_active),
            "roles": roles,
            "in_tree": len(tree) if tree else 0,
            "unassigned": len(tree.unassigned) if tree else 0,
            "depth": tree.depth() if tree else 0,
            "total_history_events": self._history.count(),
            "event_types": self._history.count_by_type(),
        }

    # ── Seed ──

    def seed_defaults(self) -> None:
        """Create a demo venue org so the service is usable immediately."""
        default_members = [
            ("owner-olivia", "Olivia Hart", "olivia@venue.com", "owner", None, "Owner", "Owner", "full_time"),
            ("gm-marco", "Marco Reyes", "marco@venue.com", "manager", "owner-olivia", "General Manager", "Management", "full_time"),
            ("mkt-chloe", "Chloe Nguyen", "chloe@venue.com", "manager", "owner-olivia", "Marketing Manager", "Marketing", "part_time"),
            ("bar-priya", "Priya Shah", "priya@venue.com", "manager", "gm-marco", "Bar Manager", "Bar", "full_time"),
            ("floor-liam", "Liam O'Connor", "liam@venue.com", "manager", "gm-marco", "Floor Manager", "Service", "full_time"),
            ("bar-sam", "Sam Patel", "sam@venue.com", "staff", "bar-priya", "Bartender", "Bar", "part_time"),
            ("bar-jess", "Jess Morgan", "jess@venue.com", "staff", "bar-priya", "Bartender", "Bar", "casual"),
            ("floor-noah", "Noah Kim", "noah@venue.com", "staff", "floor-liam", "Server", "Service", "full_time"),
            ("floor-ava", "Ava Rossi", "ava@venue.com", "staff", "floor-liam", "Server", "Service", "casual"),
        ]
        now = datetime.now(timezone.utc).isoformat()
        for member_id, name, email, role, reports_to, job_role, department, employment in default_members:
            self._members.save({
                "id": member_id,
                "full_name": name,
                "email": email,
                "role": role,
                "reports_to": reports_to,
                "is_active": True,
                "job_role": job_role,
                "department": department,
                "employment_type": employment,
                "avatar_url": None,
                "created_at": now,
                "updated_at": None,
            })
            self._history.record_event(
                "member_created",
                member_id,
                {"role": role, "reports_to": reports_to, "source": "seed"},
            )
        MEMBERS_GAUGE.set(self._members.count())
        logger.info("Seeded %d default members", len(default_members))
