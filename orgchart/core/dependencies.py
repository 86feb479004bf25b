# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repositories and services.
"""

from orgchart.core.config import settings
from orgchart.repositories.history_repository import HistoryRepository
from orgchart.repositories.member_repository import MemberRepository
from orgchart.services.notification_client import NotificationClient
from orgchart.services.orgchart_service import OrgChartService, MemberStore

# ── Singleton repository instances ──
if settings.DATABASE_URL:
    from orgchart.core.database import build_engine
    from orgchart.repositories.sql_member_repository import SqlMemberRepository

    _member_repo = SqlMemberRepository(build_engine(settings.DATABASE_URL))
else:
    _member_repo = MemberRepository()
_history_repo = HistoryRepository()
_notification_client = NotificationClient()

# ── Service instances (with injected dependencies) ──
_orgchart_service = OrgChartService(
    member_repo=_member_repo,
    history_repo=_history_repo,
    notification_client=_notification_client,
)


# ── FastAPI dependency functions ──
def get_orgchart_service() -> OrgChartService:
    return _orgchart_service


def get_member_repo() -> MemberStore:
    return _member_repo


def get_history_repo() -> HistoryRepository:
    return _history_repo


def get_notification_client() -> NotificationClient:
    return _notification_client
