from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Select, false, select
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, is_supplier_role
from ooh_portal.errors import FieldValidationError, NotFoundError
from ooh_portal.models import InventoryItem, InventoryStatus
from ooh_portal.schemas import InventoryCreate, InventoryUpdate
from ooh_portal.services.references import require_supplier


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def can_access_item(principal: Principal, item_supplier_id: str | None) -> bool:
    if not is_supplier_role(principal.role):
        return True
    return principal.supplier_id is not None and item_supplier_id == principal.supplier_id


def resolve_write_supplier_id(principal: Principal, requested_supplier_id: str | None) -> str | None:
    if is_supplier_role(principal.role):
        return principal.supplier_id
    return requested_supplier_id


def scoped_inventory_query(principal: Principal) -> Select:
    stmt = select(InventoryItem)
    if is_supplier_role(principal.role):
        if not principal.supplier_id:
            return stmt.where(false())
        stmt = stmt.where(InventoryItem.supplier_id == principal.supplier_id)
    return stmt


def list_inventory(
    db: Session,
    *,
    principal: Principal,
    supplier_id: str | None = None,
    region: str | None = None,
    status: InventoryStatus | None = None,
    screen_type: str | None = None,
) -> list[InventoryItem]:
    stmt = scoped_inventory_query(principal)
    if supplier_id:
        stmt = stmt.where(InventoryItem.supplier_id == supplier_id)
    if region:
        stmt = stmt.where(InventoryItem.region == region)
    if status is not None:
        stmt = stmt.where(InventoryItem.status == status)
    if screen_type:
        stmt = stmt.where(InventoryItem.screen_type == screen_type)
    return db.execute(stmt.order_by(InventoryItem.region.asc(), InventoryItem.screen_name.asc())).scalars().all()


def get_inventory_item(db: Session, *, principal: Principal, item_id: str) -> InventoryItem:
    item = db.get(InventoryItem, item_id)
    if not item or not can_access_item(principal, item.supplier_id):
        raise NotFoundError('Inventory item')
    return item


def _require_write_supplier(db: Session, principal: Principal, supplier_id: str | None) -> str:
    if not supplier_id:
        if is_supplier_role(principal.role):
            raise FieldValidationError('supplierId', 'Your account is not linked to a supplier')
        raise FieldValidationError('supplierId', 'Field required')
    require_supplier(db, supplier_id)
    return supplier_id


def create_inventory_item(db: Session, *, principal: Principal, data: InventoryCreate) -> InventoryItem:
    values = data.model_dump()
    values['supplier_id'] = _require_write_supplier(
        db, principal, resolve_write_supplier_id(principal, data.supplier_id)
    )

    item = InventoryItem(**values, updated_at=_now())
    db.add(item)
    db.flush()
    return item


def update_inventory_item(
    db: Session,
    *,
    principal: Principal,
    item_id: str,
    data: InventoryUpdate,
) -> InventoryItem:
    item = get_inventory_item(db, principal=principal, item_id=item_id)
    changes = data.changes()
    if 'supplier_id' in changes:
        changes['supplier_id'] = _require_write_supplier(
            db, principal, resolve_write_supplier_id(principal, changes['supplier_id'])
        )

    for field, value in changes.items():
        setattr(item, field, value)
    item.updated_at = _now()
    db.flush()
    return item


def delete_inventory_item(db: Session, *, principal: Principal, item_id: str) -> None:
    item = get_inventory_item(db, principal=principal, item_id=item_id)
    db.delete(item)
    db.flush()
