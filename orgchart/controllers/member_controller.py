# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member CRUD endpoints.
Thin HTTP layer — delegates ALL logic to OrgChartService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from orgchart.models.domain import ROLE_PATTERN
from orgchart.schemas.orgchart import (
    MemberCreateRequest,
    MemberResponse,
    MemberUpdateRequest,
)
from orgchart.services.orgchart_service import OrgChartService
from orgchart.core.dependencies import get_orgchart_service

router = APIRouter(prefix="/api/v1", tags=["Members"])


@router.post("/members", status_code=201, response_model=MemberResponse)
def create_member(
    payload: MemberCreateRequest,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Add a member to the organization."""
    try:
        return service.create_member(
            member_id=payload.id,
            **payload.model_dump(exclude={"id"}),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/members", response_model=list[MemberResponse])
def list_members(
    role: Optional[str] = Query(default=None, pattern=ROLE_PATTERN),
    active_only: bool = False,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """List members ordered by role, then name."""
    return service.list_members(role=role, active_only=active_only)


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(
    member_id: str,
    service: OrgChartService = Depends(get_orgchart_service),
):
    try:
        return service.get_member(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/members/{member_id}", response_model=MemberResponse)
def update_member(
    member_id: str,
    payload: MemberUpdateRequest,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Partially update a member's display attributes."""
    try:
        return service.update_member(member_id, payload.model_dump(exclude_unset=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/members/{member_id}")
def delete_member(
    member_id: str,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Delete a member; direct reports become unassigned."""
    try:
        return service.delete_member(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/members/{member_id}/reports", response_model=list[MemberResponse])
def get_direct_reports(
    member_id: str,
    service: OrgChartService = Depends(get_orgchart_service),
):
    try:
        return service.get_direct_reports(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/members/{member_id}/chain", response_model=list[MemberResponse])
def get_chain_of_command(
    member_id: str,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Managers above a member, nearest first."""
    try:
        return service.get_chain_of_command(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
