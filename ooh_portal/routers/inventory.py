from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.models import InventoryStatus
from ooh_portal.schemas import InventoryCreate, InventoryRead, InventoryUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.inventory_service import (
    create_inventory_item,
    delete_inventory_item,
    get_inventory_item,
    list_inventory,
    update_inventory_item,
)

router = APIRouter(prefix='/api/inventory', tags=['inventory'])


@router.get('', response_model=list[InventoryRead])
def inventory_index(
    supplier_id: str | None = Query(None, alias='supplierId'),
    region: str | None = None,
    status_filter: InventoryStatus | None = Query(None, alias='status'),
    screen_type: str | None = Query(None, alias='screenType'),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return list_inventory(
        db,
        principal=principal,
        supplier_id=supplier_id,
        region=region,
        status=status_filter,
        screen_type=screen_type,
    )


@router.get('/{item_id}', response_model=InventoryRead)
def inventory_show(item_id: str, principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_inventory_item(db, principal=principal, item_id=item_id)


@router.post('', response_model=InventoryRead, status_code=status.HTTP_201_CREATED)
def inventory_create(
    payload: InventoryCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    item = create_inventory_item(db, principal=principal, data=payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='INVENTORY_CREATED',
        entity_type='inventory',
        entity_id=item.id,
        ip=get_client_ip(request),
        metadata={'supplier_id': item.supplier_id, 'screen_name': item.screen_name},
    )
    db.commit()
    return item


@router.patch('/{item_id}', response_model=InventoryRead)
def inventory_update(
    item_id: str,
    payload: InventoryUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    item = update_inventory_item(db, principal=principal, item_id=item_id, data=payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='INVENTORY_UPDATED',
        entity_type='inventory',
        entity_id=item.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'status': item.status.value},
    )
    db.commit()
    return item


@router.delete('/{item_id}', status_code=status.HTTP_204_NO_CONTENT)
def inventory_delete(
    item_id: str,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    delete_inventory_item(db, principal=principal, item_id=item_id)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='INVENTORY_DELETED',
        entity_type='inventory',
        entity_id=item_id,
        ip=get_client_ip(request),
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
