from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.models import BookingStatus
from ooh_portal.schemas import BookingCreate, BookingRead, BookingUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.booking_service import create_booking, get_booking, list_bookings, update_booking

router = APIRouter(prefix='/api/bookings', tags=['bookings'])


@router.get('', response_model=list[BookingRead])
def bookings_index(
    campaign_id: str | None = Query(None, alias='campaignId'),
    supplier_id: str | None = Query(None, alias='supplierId'),
    status_filter: BookingStatus | None = Query(None, alias='status'),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return list_bookings(db, campaign_id=campaign_id, supplier_id=supplier_id, status=status_filter)


@router.get('/{booking_id}', response_model=BookingRead)
def bookings_show(booking_id: str, _: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_booking(db, booking_id)


@router.post('', response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def bookings_create(
    payload: BookingCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    booking = create_booking(db, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='BOOKING_CREATED',
        entity_type='booking',
        entity_id=booking.id,
        ip=get_client_ip(request),
        metadata={'campaign_id': booking.campaign_id, 'cost': str(booking.cost) if booking.cost is not None else None},
    )
    db.commit()
    return booking


@router.patch('/{booking_id}', response_model=BookingRead)
def bookings_update(
    booking_id: str,
    payload: BookingUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    booking = update_booking(db, booking_id, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='BOOKING_UPDATED',
        entity_type='booking',
        entity_id=booking.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'status': booking.status.value},
    )
    db.commit()
    return booking
