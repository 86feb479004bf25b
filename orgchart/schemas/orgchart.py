# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from orgchart.models.domain import EMPLOYMENT_TYPE_PATTERN, ROLE_PATTERN


# ── Member Schemas ──

class MemberCreateRequest(BaseModel):
    id: Optional[str] = Field(
        default=None, min_length=1, max_length=64, description="Generated when omitted"
    )
    full_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    role: str = Field(..., pattern=ROLE_PATTERN, description="owner, manager or staff")
    reports_to: Optional[str] = Field(default=None, description="Manager id")
    is_active: bool = True
    job_role: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    employment_type: Optional[str] = Field(default=None, pattern=EMPLOYMENT_TYPE_PATTERN)
    avatar_url: Optional[str] = None


class MemberUpdateRequest(BaseModel):
    """Partial update model for PATCH /api/v1/members/{member_id}."""
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[str] = Field(default=None, pattern=ROLE_PATTERN)
    is_active: Optional[bool] = None
    job_role: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    employment_type: Optional[str] = Field(default=None, pattern=EMPLOYMENT_TYPE_PATTERN)
    avatar_url: Optional[str] = None

    @field_validator("full_name", "email", "role", "is_active")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Optional only so the field can be omitted; an explicit null is invalid.
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class MemberResponse(BaseModel):
    id: str
    full_name: str
    email: str
    role: str
    reports_to: Optional[str] = None
    is_active: bool
    job_role: Optional[str] = None
    department: Optional[str] = None
    employment_type: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


# ── Org Chart Schemas ──

class OrgChartResponse(BaseModel):
    root: Optional[dict[str, Any]] = None
    unassigned: list[dict[str, Any]]
    total_members: int
    in_tree: int
    depth: int


class ReparentRequest(BaseModel):
    member_id: str = Field(..., min_length=1, description="Member being moved")
    new_reports_to: Optional[str] = Field(
        default=None, description="New manager id; null moves to the top level"
    )
