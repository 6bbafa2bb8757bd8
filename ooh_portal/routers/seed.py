from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ooh_portal.config import settings
from ooh_portal.db import create_tables
from ooh_portal.dependencies import get_db
from ooh_portal.seed_example import seed_demo_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api', tags=['seed'])


@router.post('/seed')
def seed(db: Session = Depends(get_db)):
    if not settings.seed_endpoint_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Not found')

    create_tables(bind=db.get_bind())
    created = seed_demo_data(db)
    db.commit()
    if created:
        logger.info('Demo data seeded through the API')
        return {'message': 'Seed data inserted'}
    return {'message': 'Seed data already present'}
