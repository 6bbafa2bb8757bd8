from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ooh_portal.auth import Principal
from ooh_portal.errors import NotFoundError
from ooh_portal.models import Campaign, CampaignStatus
from ooh_portal.schemas import CampaignCreate, CampaignUpdate


def get_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = db.get(Campaign, campaign_id)
    if not campaign:
        raise NotFoundError('Campaign')
    return campaign


def list_campaigns(db: Session, *, status: CampaignStatus | None = None) -> list[Campaign]:
    stmt = select(Campaign)
    if status is not None:
        stmt = stmt.where(Campaign.status == status)
    return db.execute(stmt.order_by(Campaign.created_at.desc(), Campaign.name.asc())).scalars().all()


def create_campaign(db: Session, *, principal: Principal, data: CampaignCreate) -> Campaign:
    campaign = Campaign(**data.model_dump(), created_by=principal.id)
    db.add(campaign)
    db.flush()
    return campaign


def update_campaign(db: Session, campaign_id: str, data: CampaignUpdate) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    for field, value in data.changes().items():
        setattr(campaign, field, value)
    db.flush()
    return campaign


def delete_campaign(db: Session, campaign_id: str) -> None:
    # Bookings, documents and invoices are left in place; there is no cascade.
    result = db.execute(delete(Campaign).where(Campaign.id == campaign_id))
    if result.rowcount == 0:
        raise NotFoundError('Campaign')
