"""
Analytics and notification routes
"""
from typing import List, Optional
from datetime import date, timedelta
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.schemas import DashboardStats, RevenuePoint
from tropicana.services.notifications import notification_center
from tropicana.services.report_service import ReportService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(tags=["Analytics"])


@router.get("/analytics/dashboard", response_model=DashboardStats)
def get_dashboard(
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Dashboard figures"""
    return ReportService(db).get_dashboard_stats(property_id)


@router.get("/analytics/revenue", response_model=List[RevenuePoint])
def get_revenue(
    start: Optional[date] = None,
    end: Optional[date] = None,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Daily revenue; defaults to the last 30 days"""
    end = end or date.today()
    start = start or end - timedelta(days=29)
    return ReportService(db).get_revenue_series(start, end, property_id)


@router.get("/notifications")
def get_notifications(
    limit: int = Query(50, ge=1, le=200),
    event_type: Optional[str] = None,
    current_user: User = Depends(require_staff)
):
    """Recent staff notifications, newest first"""
    return [n.to_dict() for n in notification_center.recent(limit, event_type)]
