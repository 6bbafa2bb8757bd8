from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.config import settings
from ooh_portal.dependencies import get_db
from ooh_portal.schemas import AuditLogRead, DashboardStats
from ooh_portal.services.audit_service import list_audit_entries
from ooh_portal.services.dashboard_service import get_dashboard_stats

router = APIRouter(prefix='/api', tags=['dashboard'])


@router.get('/dashboard/stats', response_model=DashboardStats)
def dashboard_stats(_: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return DashboardStats(**get_dashboard_stats(db))


@router.get('/audit-log', response_model=list[AuditLogRead])
def audit_log(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return list_audit_entries(db, principal=principal, limit=settings.audit_log_limit)
