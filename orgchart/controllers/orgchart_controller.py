# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Org chart tree, reparenting, stats and history endpoints.
Thin HTTP layer — delegates ALL logic to OrgChartService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from orgchart.models.domain import RejectionReason, ReparentCheck
from orgchart.schemas.orgchart import MemberResponse, OrgChartResponse, ReparentRequest
from orgchart.services.orgchart_service import OrgChartService, ReparentRejected
from orgchart.core.dependencies import get_orgchart_service, get_history_repo
from orgchart.repositories.history_repository import HistoryRepository

router = APIRouter(prefix="/api/v1", tags=["Org Chart"])


# ── Tree ──

@router.get("/org-chart", response_model=OrgChartResponse)
def get_org_chart(
    service: OrgChartService = Depends(get_orgchart_service),
):
    """The derived org tree plus any members unreachable from its root."""
    return service.get_org_tree()


@router.get("/org-chart/stats")
def get_org_chart_stats(
    service: OrgChartService = Depends(get_orgchart_service),
):
    return service.get_stats()


# ── Reparent ──

@router.post("/org-chart/reparent/check", response_model=ReparentCheck)
def check_reparent(
    payload: ReparentRequest,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Validate a move without applying it."""
    return service.check_reparent(payload.member_id, payload.new_reports_to)


@router.post("/org-chart/reparent", response_model=MemberResponse)
def reparent(
    payload: ReparentRequest,
    service: OrgChartService = Depends(get_orgchart_service),
):
    """Move a member under a new manager (or to the top level)."""
    try:
        return service.reparent(payload.member_id, payload.new_reports_to)
    except ReparentRejected as e:
        status = 404 if e.reason is RejectionReason.UNKNOWN_MEMBER else 409
        raise HTTPException(
            status_code=status,
            detail={"reason": e.reason.value, "message": e.message},
        )


# ── History ──

@router.get("/history")
def get_history(
    member_id: Optional[str] = None,
    event_type: Optional[str] = None,
    limit: int = Query(default=None, ge=1, description="Max results"),
    history_repo: HistoryRepository = Depends(get_history_repo),
):
    """Audit log for all org chart events."""
    return history_repo.get_all(member_id=member_id, event_type=event_type, limit=limit)
