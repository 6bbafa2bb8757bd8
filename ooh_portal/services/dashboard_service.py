from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ooh_portal.models import Booking, BookingStatus, Campaign, CampaignStatus


def _count(db: Session, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return int(db.execute(stmt).scalar_one())


def format_spend(total: Decimal | None) -> str:
    if total is None:
        return '0'
    return str(Decimal(total).quantize(Decimal('0.01')))


def get_dashboard_stats(db: Session) -> dict:
    total_spend = db.execute(select(func.sum(Booking.cost))).scalar_one()
    return {
        'total_campaigns': _count(db, Campaign),
        'active_campaigns': _count(db, Campaign, Campaign.status == CampaignStatus.IN_PROGRESS),
        'total_bookings': _count(db, Booking),
        'total_spend': format_spend(total_spend),
        'pending_bookings': _count(db, Booking, Booking.status == BookingStatus.PENDING),
        'completed_bookings': _count(db, Booking, Booking.status == BookingStatus.COMPLETED),
    }
