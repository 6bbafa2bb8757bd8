from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal, get_current_principal
from ooh_portal.dependencies import get_client_ip, get_db
from ooh_portal.models import CampaignStatus
from ooh_portal.schemas import CampaignCreate, CampaignRead, CampaignUpdate
from ooh_portal.services.audit_service import log_audit
from ooh_portal.services.campaign_service import (
    create_campaign,
    delete_campaign,
    get_campaign,
    list_campaigns,
    update_campaign,
)

router = APIRouter(prefix='/api/campaigns', tags=['campaigns'])


@router.get('', response_model=list[CampaignRead])
def campaigns_index(
    status_filter: CampaignStatus | None = Query(None, alias='status'),
    _: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return list_campaigns(db, status=status_filter)


@router.get('/{campaign_id}', response_model=CampaignRead)
def campaigns_show(campaign_id: str, _: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return get_campaign(db, campaign_id)


@router.post('', response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
def campaigns_create(
    payload: CampaignCreate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    campaign = create_campaign(db, principal=principal, data=payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='CAMPAIGN_CREATED',
        entity_type='campaign',
        entity_id=campaign.id,
        ip=get_client_ip(request),
        metadata={'name': campaign.name},
    )
    db.commit()
    return campaign


@router.patch('/{campaign_id}', response_model=CampaignRead)
def campaigns_update(
    campaign_id: str,
    payload: CampaignUpdate,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    campaign = update_campaign(db, campaign_id, payload)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='CAMPAIGN_UPDATED',
        entity_type='campaign',
        entity_id=campaign.id,
        ip=get_client_ip(request),
        metadata={'fields': sorted(payload.model_fields_set), 'status': campaign.status.value},
    )
    db.commit()
    return campaign


@router.delete('/{campaign_id}', status_code=status.HTTP_204_NO_CONTENT)
def campaigns_delete(
    campaign_id: str,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    delete_campaign(db, campaign_id)
    log_audit(
        db,
        actor_user_id=principal.id,
        action='CAMPAIGN_DELETED',
        entity_type='campaign',
        entity_id=campaign_id,
        ip=get_client_ip(request),
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
