from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.models import InvoiceStatus
from ooh_portal.schemas import InvoiceCreate, InvoiceRead, InvoiceUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.invoice_service import create_invoice, get_invoice, list_invoices, update_invoice

router = APIRouter(prefix='/api/invoices', tags=['invoices'])


@router.get('', response_model=list[InvoiceRead])
def invoices_index(
    campaign_id: str | None = Query(None, alias='campaignId'),
    supplier_id: str | None = Query(None, alias='supplierId'),
    status_filter: InvoiceStatus | None = Query(None, alias='status'),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return list_invoices(db, campaign_id=campaign_id, supplier_id=supplier_id, status=status_filter)


@router.get('/{invoice_id}', response_model=InvoiceRead)
def invoices_show(invoice_id: str, _: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_invoice(db, invoice_id)


@router.post('', response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
def invoices_create(
    payload: InvoiceCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    invoice = create_invoice(db, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='INVOICE_CREATED',
        entity_type='invoice',
        entity_id=invoice.id,
        ip=get_client_ip(request),
        metadata={'invoice_number': invoice.invoice_number, 'amount': str(invoice.amount)},
    )
    db.commit()
    return invoice


@router.patch('/{invoice_id}', response_model=InvoiceRead)
def invoices_update(
    invoice_id: str,
    payload: InvoiceUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    invoice = update_invoice(db, invoice_id, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='INVOICE_UPDATED',
        entity_type='invoice',
        entity_id=invoice.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'status': invoice.status.value},
    )
    db.commit()
    return invoice
