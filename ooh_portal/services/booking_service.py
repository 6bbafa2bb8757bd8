from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.errors import NotFoundError
from ooh_portal.models import Booking, BookingStatus
from ooh_portal.schemas import BookingCreate, BookingUpdate
from ooh_portal.services.references import require_campaign, require_supplier


def get_booking(db: Session, booking_id: str) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError('Booking')
    return booking


def list_bookings(
    db: Session,
    *,
    campaign_id: str | None = None,
    supplier_id: str | None = None,
    status: BookingStatus | None = None,
) -> list[Booking]:
    stmt = select(Booking)
    if campaign_id:
        stmt = stmt.where(Booking.campaign_id == campaign_id)
    if supplier_id:
        stmt = stmt.where(Booking.supplier_id == supplier_id)
    if status is not None:
        stmt = stmt.where(Booking.status == status)
    return db.execute(stmt.order_by(Booking.created_at.desc())).scalars().all()


def create_booking(db: Session, data: BookingCreate) -> Booking:
    require_campaign(db, data.campaign_id)
    require_supplier(db, data.supplier_id)

    booking = Booking(**data.model_dump())
    db.add(booking)
    db.flush()
    return booking


def update_booking(db: Session, booking_id: str, data: BookingUpdate) -> Booking:
    booking = get_booking(db, booking_id)
    changes = data.changes()
    if 'campaign_id' in changes:
        require_campaign(db, changes['campaign_id'])
    if 'supplier_id' in changes:
        require_supplier(db, changes['supplier_id'])

    for field, value in changes.items():
        setattr(booking, field, value)
    db.flush()
    return booking
