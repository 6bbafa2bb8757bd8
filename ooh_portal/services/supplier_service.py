from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.errors import NotFoundError
from ooh_portal.models import Supplier
from ooh_portal.schemas import SupplierCreate, SupplierUpdate


def get_supplier(db: Session, supplier_id: str) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if not supplier:
        raise NotFoundError('Supplier')
    return supplier


def list_suppliers(db: Session) -> list[Supplier]:
    return db.execute(select(Supplier).order_by(Supplier.name.asc())).scalars().all()


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    supplier = Supplier(**data.model_dump())
    db.add(supplier)
    db.flush()
    return supplier


def update_supplier(db: Session, supplier_id: str, data: SupplierUpdate) -> Supplier:
    supplier = get_supplier(db, supplier_id)
    for field, value in data.changes().items():
        setattr(supplier, field, value)
    db.flush()
    return supplier
