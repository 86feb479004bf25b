# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for members backed by a SQL database."""
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from orgchart.core.logging import get_logger

logger = get_logger(__name__)

MEMBER_COLS = (
    "id, full_name, email, role, reports_to, is_active, job_role, department, "
    "employment_type, avatar_url, created_at, updated_at"
)

UPDATABLE_COLS = frozenset({
    "full_name", "email", "role", "reports_to", "is_active", "job_role",
    "department", "employment_type", "avatar_url", "updated_at",
})

SCHEMA = """
    CREATE TABLE IF NOT EXISTS members (
        id VARCHAR(64) PRIMARY KEY,
        full_name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        role VARCHAR(16) NOT NULL,
        reports_to VARCHAR(64),
        is_active BOOLEAN NOT NULL,
        job_role VARCHAR(255),
        department VARCHAR(255),
        employment_type VARCHAR(32),
        avatar_url TEXT,
        created_at VARCHAR(64) NOT NULL,
        updated_at VARCHAR(64)
    )
"""

ORDER_BY = (
    "ORDER BY CASE role WHEN 'owner' THEN 0 WHEN 'manager' THEN 1 ELSE 2 END, "
    "full_name"
)


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "full_name": row[1],
        "email": row[2],
        "role": row[3],
        "reports_to": row[4],
        "is_active": bool(row[5]),
        "job_role": row[6],
        "department": row[7],
        "employment_type": row[8],
        "avatar_url": row[9],
        "created_at": row[10],
        "updated_at": row[11],
    }


class SqlMemberRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def ensure_schema(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text(SCHEMA))
        logger.info("Members table ready")

    def verify_connection(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ── Read ───────────────────────────────────────────────────────────

    def get_all(self) -> List[Dict[str, Any]]:
        with self._engine.connect() as conn:
            rows = conn.execute(text(f"SELECT {MEMBER_COLS} FROM members {ORDER_BY}")).fetchall()
        return [_row_to_dict(r) for r in rows]

    def get_by_id(self, member_id: str) -> Optional[Dict[str, Any]]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {MEMBER_COLS} FROM members WHERE id = :id"),
                {"id": member_id},
            ).fetchone()
        return _row_to_dict(row) if row else None

    def exists(self, member_id: str) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT 1 FROM members WHERE id = :id"), {"id": member_id}
            ).fetchone()
        return row is not None

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM members")).scalar() or 0

    # ── Write ──────────────────────────────────────────────────────────

    def save(self, member: Dict[str, Any]) -> None:
        params = {
            "id": member["id"],
            "full_name": member["full_name"],
            "email": member["email"],
            "role": member["role"],
            "reports_to": member.get("reports_to"),
            "is_active": bool(member.get("is_active", True)),
            "job_role": member.get("job_role"),
            "department": member.get("department"),
            "employment_type": member.get("employment_type"),
            "avatar_url": member.get("avatar_url"),
            "created_at": member["created_at"],
            "updated_at": member.get("updated_at"),
        }
        with self._engine.begin() as conn:
            conn.execute(
                text(f"""
                    INSERT INTO members ({MEMBER_COLS})
                    VALUES (:id, :full_name, :email, :role, :reports_to, :is_active,
                            :job_role, :department, :employment_type, :avatar_url,
                            :created_at, :updated_at)
                """),
                params,
            )

    def update(self, member_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        unknown = set(fields) - UPDATABLE_COLS
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")
        if fields:
            assignments = ", ".join(f"{col} = :{col}" for col in fields)
            with self._engine.begin() as conn:
                conn.execute(
                    text(f"UPDATE members SET {assignments} WHERE id = :member_id"),
                    {**fields, "member_id": member_id},
                )
        return self.get_by_id(member_id)

    def delete(self, member_id: str) -> Optional[Dict[str, Any]]:
        """Remove a member; its direct reports lose their manager."""
        member = self.get_by_id(member_id)
        if member is None:
            return None
        with self._engine.begin() as conn:
            conn.execute(
                text("UPDATE members SET reports_to = NULL WHERE reports_to = :id"),
                {"id": member_id},
            )
            conn.execute(text("DELETE FROM members WHERE id = :id"), {"id": member_id})
        return member

    # ── Bulk / internal ────────────────────────────────────────────────

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM members"))
