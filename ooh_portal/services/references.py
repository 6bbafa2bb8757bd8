from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.errors import FieldValidationError
from ooh_portal.models import Booking, Campaign, Supplier


def require_campaign(db: Session, campaign_id: str, *, field: str = 'campaignId') -> None:
    if not db.execute(select(Campaign.id).where(Campaign.id == campaign_id)).scalar_one_or_none():
        raise FieldValidationError(field, 'Campaign does not exist')


def require_supplier(db: Session, supplier_id: str, *, field: str = 'supplierId') -> None:
    if not db.execute(select(Supplier.id).where(Supplier.id == supplier_id)).scalar_one_or_none():
        raise FieldValidationError(field, 'Supplier does not exist')


def require_booking(db: Session, booking_id: str, *, field: str = 'bookingId') -> None:
    if not db.execute(select(Booking.id).where(Booking.id == booking_id)).scalar_one_or_none():
        raise FieldValidationError(field, 'Booking does not exist')
