from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.config import settings
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.schemas import LoginRequest, LoginResponse, UserRead
from ooh_portal.security.passwords import check_user_password
from ooh_portal.security.sessions import create_web_session, revoke_web_session, session_token_from_request
from ooh_portal.services.audit_service import log_audit, log_auth_event
from ooh_portal.services.user_service import get_user, get_user_by_username

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/auth', tags=['auth'])


@router.post('/login', response_model=LoginResponse)
def login(payload: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    ip = get_client_ip(request)
    user_agent = request.headers.get('user-agent')

    user = get_user_by_username(db, payload.username)
    failure_reason = None
    if not user:
        failure_reason = 'UNKNOWN_USERNAME'
    elif not user.active:
        failure_reason = 'INACTIVE_USER'
    elif not check_user_password(user, payload.password):
        failure_reason = 'BAD_PASSWORD'

    if failure_reason:
        log_auth_event(
            db,
            attempted_username=payload.username,
            success=False,
            failure_reason=failure_reason,
            user_id=user.id if user else None,
            ip=ip,
            user_agent=user_agent,
        )
        db.commit()
        logger.info('Login failed for %r: %s', payload.username, failure_reason)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid credentials')

    token = create_web_session(db, user.id, ip=ip, user_agent=user_agent)
    log_auth_event(
        db,
        attempted_username=payload.username,
        success=True,
        user_id=user.id,
        ip=ip,
        user_agent=user_agent,
    )
    log_audit(db, actor_user_id=user.id, action='AUTH_LOGIN', ip=ip, metadata={'username': user.username})
    db.commit()
    logger.info('User %s logged in', user.username)

    response.headers[settings.session_header_name] = token
    return LoginResponse(**UserRead.model_validate(user).model_dump(), token=token)


@router.get('/me', response_model=UserRead)
def me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_user(db, principal.id)


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    token = session_token_from_request(request)
    if token:
        revoke_web_session(db, token)
    log_audit(db, actor_user_id=principal.id, action='AUTH_LOGOUT', ip=get_client_ip(request))
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
