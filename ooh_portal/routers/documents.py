from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.models import DocumentType
from ooh_portal.schemas import DocumentCreate, DocumentRead, DocumentUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.document_service import create_document, get_document, list_documents, update_document

router = APIRouter(prefix='/api/documents', tags=['documents'])


@router.get('', response_model=list[DocumentRead])
def documents_index(
    campaign_id: str | None = Query(None, alias='campaignId'),
    booking_id: str | None = Query(None, alias='bookingId'),
    document_type: DocumentType | None = Query(None, alias='type'),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return list_documents(db, campaign_id=campaign_id, booking_id=booking_id, document_type=document_type)


@router.get('/{document_id}', response_model=DocumentRead)
def documents_show(document_id: str, _: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_document(db, document_id)


@router.post('', response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
def documents_create(
    payload: DocumentCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    document = create_document(db, principal=principal, data=payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='DOCUMENT_UPLOADED',
        entity_type='document',
        entity_id=document.id,
        ip=get_client_ip(request),
        metadata={'type': document.type.value, 'file_name': document.file_name},
    )
    db.commit()
    return document


@router.patch('/{document_id}', response_model=DocumentRead)
def documents_update(
    document_id: str,
    payload: DocumentUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    document = update_document(db, document_id, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='DOCUMENT_UPDATED',
        entity_type='document',
        entity_id=document.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'status': document.status.value},
    )
    db.commit()
    return document
