from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Capability, Principal, get_current_principal, has_capability, require_capability
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.schemas import UserCreate, UserRead, UserUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.user_service import create_user, get_user, list_users, update_user

router = APIRouter(prefix='/api/users', tags=['users'])

admin_access = require_capability(Capability.ADMINISTER, entity='User')


@router.get('', response_model=list[UserRead])
def users_index(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    if not has_capability(principal.role, Capability.ADMINISTER):
        return []
    return list_users(db)


@router.get('/{user_id}', response_model=UserRead)
def users_show(user_id: str, _: Principal = Depends(admin_access), db: Session = Depends(get_db)):
    return get_user(db, user_id)


@router.post('', response_model=UserRead, status_code=status.HTTP_201_CREATED)
def users_create(
    payload: UserCreate,
    request: Request,
    principal: Principal = Depends(admin_access),
    db: Session = Depends(get_db),
):
    user = create_user(db, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='USER_CREATED',
        entity_type='user',
        entity_id=user.id,
        ip=get_client_ip(request),
        metadata={'username': user.username, 'role': user.role.value},
    )
    db.commit()
    return user


@router.patch('/{user_id}', response_model=UserRead)
def users_update(
    user_id: str,
    payload: UserUpdate,
    request: Request,
    principal: Principal = Depends(admin_access),
    db: Session = Depends(get_db),
):
    user = update_user(db, user_id, payload)
    # Never record the password itself, only that it changed.
    changed = sorted(payload.model_fields_set)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='USER_UPDATED',
        entity_type='user',
        entity_id=user.id,
        ip=get_client_ip(request),
        metadata={'fields': changed, 'active': user.active},
    )
    db.commit()
    return user
