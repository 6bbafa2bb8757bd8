from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.errors import FieldValidationError, NotFoundError
from ooh_portal.models import Invoice, InvoiceStatus
from ooh_portal.schemas import InvoiceCreate, InvoiceUpdate
from ooh_portal.services.references import require_campaign, require_supplier


def get_invoice(db: Session, invoice_id: str) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if not invoice:
        raise NotFoundError('Invoice')
    return invoice


def list_invoices(
    db: Session,
    *,
    campaign_id: str | None = None,
    supplier_id: str | None = None,
    status: InvoiceStatus | None = None,
) -> list[Invoice]:
    stmt = select(Invoice)
    if campaign_id:
        stmt = stmt.where(Invoice.campaign_id == campaign_id)
    if supplier_id:
        stmt = stmt.where(Invoice.supplier_id == supplier_id)
    if status is not None:
        stmt = stmt.where(Invoice.status == status)
    return db.execute(stmt.order_by(Invoice.created_at.desc(), Invoice.invoice_number.asc())).scalars().all()


def _ensure_number_free(db: Session, invoice_number: str, *, exclude_id: str | None = None) -> None:
    existing_id = db.execute(
        select(Invoice.id).where(Invoice.invoice_number == invoice_number)
    ).scalar_one_or_none()
    if existing_id and existing_id != exclude_id:
        raise FieldValidationError('invoiceNumber', 'Invoice number already exists')


def create_invoice(db: Session, data: InvoiceCreate) -> Invoice:
    require_campaign(db, data.campaign_id)
    if data.supplier_id:
        require_supplier(db, data.supplier_id)
    _ensure_number_free(db, data.invoice_number)

    invoice = Invoice(**data.model_dump())
    db.add(invoice)
    db.flush()
    return invoice


def update_invoice(db: Session, invoice_id: str, data: InvoiceUpdate) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    changes = data.changes()
    if 'campaign_id' in changes:
        require_campaign(db, changes['campaign_id'])
    if changes.get('supplier_id'):
        require_supplier(db, changes['supplier_id'])
    if 'invoice_number' in changes:
        _ensure_number_free(db, changes['invoice_number'], exclude_id=invoice.id)

    for field, value in changes.items():
        setattr(invoice, field, value)
    db.flush()
    return invoice
