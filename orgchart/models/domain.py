# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

ROLE_PATTERN = "^(owner|manager|staff)$"
EMPLOYMENT_TYPE_PATTERN = "^(full_time|part_time|casual)$"

# Listing order: owners first, then managers, then staff.
ROLE_RANK: dict[str, int] = {"owner": 0, "manager": 1, "staff": 2}


class Member(BaseModel):
    """A single person in the organization's flat profile collection."""
    id: str = Field(..., min_length=1, max_length=64, description="Member id")
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=1, max_length=255, description="Member email")
    role: str = Field(
        ..., pattern=ROLE_PATTERN, description="Role: owner, manager or staff"
    )
    reports_to: Optional[str] = Field(
        default=None, description="Id of the direct manager, absent for the top"
    )
    is_active: bool = True
    job_role: Optional[str] = None
    department: Optional[str] = None
    employment_type: Optional[str] = Field(
        default=None, pattern=EMPLOYMENT_TYPE_PATTERN
    )
    avatar_url: Optional[str] = None
    created_at: Optional[str] = None


class RejectionReason(str, Enum):
    """Why a reparent move was refused."""
    SELF_PARENT = "self_parent"
    CYCLE_DETECTED = "cycle_detected"
    UNKNOWN_MEMBER = "unknown_member"


class ReparentCheck(BaseModel):
    """Outcome of validating a reparent move. Rejections are values, not errors."""
    allowed: bool
    member_id: str
    new_reports_to: Optional[str] = None
    reason: Optional[RejectionReason] = None
    message: str = "Move allowed"
