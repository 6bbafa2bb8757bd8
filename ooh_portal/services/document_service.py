from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal
from ooh_portal.errors import NotFoundError
from ooh_portal.models import Document, DocumentType
from ooh_portal.schemas import DocumentCreate, DocumentUpdate
from ooh_portal.services.references import require_booking, require_campaign


def get_document(db: Session, document_id: str) -> Document:
    document = db.get(Document, document_id)
    if not document:
        raise NotFoundError('Document')
    return document


def list_documents(
    db: Session,
    *,
    campaign_id: str | None = None,
    booking_id: str | None = None,
    document_type: DocumentType | None = None,
) -> list[Document]:
    stmt = select(Document)
    if campaign_id:
        stmt = stmt.where(Document.campaign_id == campaign_id)
    if booking_id:
        stmt = stmt.where(Document.booking_id == booking_id)
    if document_type is not None:
        stmt = stmt.where(Document.type == document_type)
    return db.execute(stmt.order_by(Document.uploaded_at.desc())).scalars().all()


def _check_references(db: Session, *, campaign_id: str | None, booking_id: str | None) -> None:
    if campaign_id:
        require_campaign(db, campaign_id)
    if booking_id:
        require_booking(db, booking_id)


def create_document(db: Session, *, principal: Principal, data: DocumentCreate) -> Document:
    _check_references(db, campaign_id=data.campaign_id, booking_id=data.booking_id)
    document = Document(**data.model_dump(), uploaded_by=principal.id)
    db.add(document)
    db.flush()
    return document


def update_document(db: Session, document_id: str, data: DocumentUpdate) -> Document:
    document = get_document(db, document_id)
    changes = data.changes()
    _check_references(db, campaign_id=changes.get('campaign_id'), booking_id=changes.get('booking_id'))

    for field, value in changes.items():
        setattr(document, field, value)
    db.flush()
    return document
