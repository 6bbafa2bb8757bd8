from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.schemas import SupplierCreate, SupplierRead, SupplierUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.supplier_service import create_supplier, get_supplier, list_suppliers, update_supplier

router = APIRouter(prefix='/api/suppliers', tags=['suppliers'])


@router.get('', response_model=list[SupplierRead])
def suppliers_index(_: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return list_suppliers(db)


@router.get('/{supplier_id}', response_model=SupplierRead)
def suppliers_show(supplier_id: str, _: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_supplier(db, supplier_id)


@router.post('', response_model=SupplierRead, status_code=status.HTTP_201_CREATED)
def suppliers_create(
    payload: SupplierCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    supplier = create_supplier(db, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='SUPPLIER_CREATED',
        entity_type='supplier',
        entity_id=supplier.id,
        ip=get_client_ip(request),
        metadata={'name': supplier.name},
    )
    db.commit()
    return supplier


@router.patch('/{supplier_id}', response_model=SupplierRead)
def suppliers_update(
    supplier_id: str,
    payload: SupplierUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    supplier = update_supplier(db, supplier_id, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='SUPPLIER_UPDATED',
        entity_type='supplier',
        entity_id=supplier.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'active': supplier.active},
    )
    db.commit()
    return supplier
