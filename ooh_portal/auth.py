from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, HTTPException, Request, status

from ooh_portal.errors import NotFoundError
from ooh_portal.models import UserRole as Role


class Capability(str, Enum):
    VIEW_DASHBOARD = 'view_dashboard'
    VIEW_CAMPAIGNS = 'view_campaigns'
    VIEW_BOOKINGS = 'view_bookings'
    VIEW_INVENTORY = 'view_inventory'
    MANAGE_INVENTORY = 'manage_inventory'
    VIEW_DOCUMENTS = 'view_documents'
    VIEW_INVOICES = 'view_invoices'
    ADMINISTER = 'administer'
    VIEW_AUDIT_LOG = 'view_audit_log'


GOVERNMENT_ROLES = frozenset({Role.DEPARTMENT_ADMIN, Role.CAMPAIGN_PLANNER, Role.FINANCE_OFFICER, Role.AUDITOR})
SUPPLIER_ROLES = frozenset({Role.SUPPLIER_ADMIN, Role.SUPPLIER_USER})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.DEPARTMENT_ADMIN: frozenset(Capability),
    Role.CAMPAIGN_PLANNER: frozenset(
        {
            Capability.VIEW_DASHBOARD,
            Capability.VIEW_CAMPAIGNS,
            Capability.VIEW_BOOKINGS,
            Capability.VIEW_INVENTORY,
            Capability.VIEW_DOCUMENTS,
        }
    ),
    Role.FINANCE_OFFICER: frozenset({Capability.VIEW_DASHBOARD, Capability.VIEW_INVOICES}),
    Role.SUPPLIER_ADMIN: frozenset(
        {
            Capability.VIEW_DASHBOARD,
            Capability.VIEW_BOOKINGS,
            Capability.VIEW_INVENTORY,
            Capability.MANAGE_INVENTORY,
            Capability.VIEW_DOCUMENTS,
        }
    ),
    Role.SUPPLIER_USER: frozenset(
        {
            Capability.VIEW_DASHBOARD,
            Capability.VIEW_BOOKINGS,
            Capability.VIEW_INVENTORY,
            Capability.MANAGE_INVENTORY,
            Capability.VIEW_DOCUMENTS,
        }
    ),
    Role.AUDITOR: frozenset(
        {
            Capability.VIEW_DASHBOARD,
            Capability.VIEW_CAMPAIGNS,
            Capability.VIEW_BOOKINGS,
            Capability.VIEW_INVENTORY,
            Capability.VIEW_DOCUMENTS,
            Capability.VIEW_INVOICES,
            Capability.VIEW_AUDIT_LOG,
        }
    ),
}


@dataclass
class Principal:
    id: str
    username: str
    full_name: str
    role: Role
    supplier_id: str | None
    active: bool


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES[Role(role)]


def is_supplier_role(role: Role) -> bool:
    return Role(role) in SUPPLIER_ROLES


def get_current_principal(request: Request) -> Principal:
    principal = getattr(request.state, 'principal', None)
    if not principal or not principal.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated')
    return principal


def require_capability(capability: Capability, *, entity: str):
    # Callers without the capability are told the resource does not exist.
    def _dep(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_capability(principal.role, capability):
            raise NotFoundError(entity)
        return principal

    return _dep
