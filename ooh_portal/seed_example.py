from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from ooh_portal.db import SessionLocal, create_tables
from ooh_portal.models import (
    Booking,
    BookingStatus,
    Campaign,
    CampaignStatus,
    Document,
    DocumentStatus,
    DocumentType,
    InventoryItem,
    InventoryStatus,
    Invoice,
    InvoiceStatus,
    Supplier,
    User,
    UserRole,
)
from ooh_portal.security.passwords import hash_password

logger = logging.getLogger(__name__)

SEED_MARKER_USERNAME = 'admin'


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def _user(username: str, password: str, full_name: str, role: UserRole, supplier_id: str | None = None) -> User:
    return User(
        username=username,
        password_hash=hash_password(password),
        full_name=full_name,
        email=f'{username}@ooh.gov.za',
        role=role,
        supplier_id=supplier_id,
        active=True,
    )


def _screen(supplier: Supplier, name: str, screen_type: str, location: str, region: str, **extra) -> InventoryItem:
    return InventoryItem(supplier_id=supplier.id, screen_name=name, screen_type=screen_type, location=location, region=region, **extra)


def seed_demo_data(db: Session) -> bool:
    """Insert the demo fixtures once. Returns False when they are already present."""
    if db.execute(select(User.id).where(User.username == SEED_MARKER_USERNAME)).scalar_one_or_none():
        return False

    jcdecaux = Supplier(
        name='JCDecaux South Africa',
        contact_person='Thandi Mokoena',
        email='bookings@jcdecaux.co.za',
        phone='+27 11 555 0100',
        address='Sandton, Johannesburg',
    )
    primedia = Supplier(
        name='Primedia Outdoor',
        contact_person='Pieter van der Merwe',
        email='outdoor@primedia.co.za',
        phone='+27 21 555 0200',
        address='Cape Town',
    )
    db.add_all([jcdecaux, primedia])
    db.flush()

    admin = _user('admin', 'admin123', 'Nomsa Dlamini', UserRole.DEPARTMENT_ADMIN)
    db.add_all(
        [
            admin,
            _user('planner', 'planner123', 'Sipho Nkosi', UserRole.CAMPAIGN_PLANNER),
            _user('finance', 'finance123', 'Ayesha Patel', UserRole.FINANCE_OFFICER),
            _user('supplier', 'supplier123', 'Thandi Mokoena', UserRole.SUPPLIER_ADMIN, jcdecaux.id),
            _user('primedia', 'primedia123', 'Pieter van der Merwe', UserRole.SUPPLIER_USER, primedia.id),
            _user('auditor', 'auditor123', 'Johan Botha', UserRole.AUDITOR),
        ]
    )
    db.flush()

    youth_month = Campaign(
        name='Youth Month Awareness',
        description='National youth employment programme awareness drive.',
        status=CampaignStatus.IN_PROGRESS,
        budget=Decimal('1500000.00'),
        start_date=_ts(2026, 6, 1),
        end_date=_ts(2026, 6, 30),
        region='Gauteng',
        target_reach=2500000,
        created_by=admin.id,
    )
    road_safety = Campaign(
        name='Road Safety Easter Drive',
        description='Holiday season road safety messaging on major routes.',
        status=CampaignStatus.APPROVED,
        budget=Decimal('850000.00'),
        start_date=_ts(2026, 3, 20),
        end_date=_ts(2026, 4, 10),
        region='KwaZulu-Natal',
        target_reach=1200000,
        created_by=admin.id,
    )
    census = Campaign(
        name='Census Participation',
        description='Encourage household participation in the national census.',
        status=CampaignStatus.DRAFT,
        region='Western Cape',
        created_by=admin.id,
    )
    db.add_all([youth_month, road_safety, census])
    db.flush()

    sandton_booking = Booking(
        campaign_id=youth_month.id,
        supplier_id=jcdecaux.id,
        site_description='Sandton City digital spectacular',
        location='Rivonia Rd, Sandton',
        media_type='Digital billboard',
        cost=Decimal('250000.00'),
        status=BookingStatus.IN_PROGRESS,
        start_date=_ts(2026, 6, 1),
        end_date=_ts(2026, 6, 30),
    )
    db.add_all(
        [
            sandton_booking,
            Booking(
                campaign_id=road_safety.id,
                supplier_id=primedia.id,
                site_description='N3 Durban inbound gantry',
                location='N3, Pinetown',
                media_type='Static billboard',
                cost=Decimal('180000.50'),
                status=BookingStatus.PENDING,
                start_date=_ts(2026, 3, 20),
                end_date=_ts(2026, 4, 10),
            ),
            Booking(
                campaign_id=youth_month.id,
                supplier_id=jcdecaux.id,
                site_description='Park Station bus shelters (10 faces)',
                location='Braamfontein, Johannesburg',
                media_type='Street furniture',
                cost=Decimal('95000.00'),
                status=BookingStatus.COMPLETED,
                start_date=_ts(2026, 5, 1),
                end_date=_ts(2026, 5, 31),
            ),
        ]
    )
    db.flush()

    db.add_all(
        [
            Document(
                campaign_id=youth_month.id,
                type=DocumentType.ARTWORK,
                file_name='youth-month-48sheet.pdf',
                file_size=2480133,
                mime_type='application/pdf',
                status=DocumentStatus.VALIDATED,
                uploaded_by=admin.id,
            ),
            Document(
                campaign_id=youth_month.id,
                booking_id=sandton_booking.id,
                type=DocumentType.PROOF_OF_FLIGHTING,
                file_name='sandton-flighting-0601.jpg',
                file_size=845221,
                mime_type='image/jpeg',
                gps_latitude='-26.1076',
                gps_longitude='28.0567',
                captured_at=_ts(2026, 6, 1),
                uploaded_by=admin.id,
            ),
            Invoice(
                campaign_id=youth_month.id,
                supplier_id=jcdecaux.id,
                invoice_number='INV-2026-0001',
                amount=Decimal('250000.00'),
                status=InvoiceStatus.SENT,
                issued_at=_ts(2026, 6, 2),
                due_date=_ts(2026, 7, 2),
            ),
        ]
    )

    db.add_all(
        [
            _screen(jcdecaux, 'Sandton Spectacular', 'Digital billboard', 'Rivonia Rd, Sandton', 'Gauteng',
                    gps_latitude='-26.1076', gps_longitude='28.0567', dimensions='12m x 4m', resolution='1920x640',
                    facing='North', daily_rate=Decimal('8500.00'), weekly_rate=Decimal('52000.00'),
                    monthly_rate=Decimal('195000.00'), status=InventoryStatus.BOOKED, illuminated=True, digital=True,
                    traffic_count=120000),
            _screen(jcdecaux, 'Park Station Shelters', 'Bus shelter', 'Braamfontein, Johannesburg', 'Gauteng',
                    dimensions='1.2m x 1.8m', daily_rate=Decimal('450.00'), weekly_rate=Decimal('2800.00'),
                    illuminated=True, traffic_count=45000),
            _screen(jcdecaux, 'V&A Waterfront Digital', 'Digital screen', 'V&A Waterfront, Cape Town', 'Western Cape',
                    resolution='1080x1920', facing='East', daily_rate=Decimal('3200.00'),
                    weekly_rate=Decimal('19500.00'), digital=True, illuminated=True, traffic_count=80000),
            _screen(jcdecaux, 'OR Tambo Arrivals Wall', 'Digital screen', 'OR Tambo International', 'Gauteng',
                    resolution='3840x1080', daily_rate=Decimal('6000.00'), monthly_rate=Decimal('150000.00'),
                    status=InventoryStatus.MAINTENANCE, digital=True, illuminated=True,
                    notes='Panel replacement scheduled.'),
            _screen(primedia, 'N3 Pinetown Gantry', 'Static billboard', 'N3, Pinetown', 'KwaZulu-Natal',
                    dimensions='18m x 6m', facing='West', daily_rate=Decimal('4100.00'),
                    weekly_rate=Decimal('26000.00'), status=InventoryStatus.BOOKED, traffic_count=150000),
            _screen(primedia, 'M1 Double Decker', 'Static billboard', 'M1 South, Johannesburg', 'Gauteng',
                    dimensions='12m x 3m', facing='South', daily_rate=Decimal('3500.00'), illuminated=True,
                    traffic_count=110000),
            _screen(primedia, 'Durban Beachfront LED', 'Digital billboard', 'OR Tambo Parade, Durban', 'KwaZulu-Natal',
                    resolution='1280x720', daily_rate=Decimal('5200.00'), weekly_rate=Decimal('33000.00'),
                    status=InventoryStatus.RESERVED, digital=True, illuminated=True),
            _screen(primedia, 'N1 Century City', 'Static billboard', 'N1, Century City', 'Western Cape',
                    dimensions='9m x 3m', facing='North', daily_rate=Decimal('2900.00'), traffic_count=95000),
        ]
    )
    db.flush()
    logger.info('Seeded demo data: 2 suppliers, 6 users, 3 campaigns, 8 inventory items')
    return True


def seed() -> bool:
    create_tables()
    with SessionLocal() as db:
        created = seed_demo_data(db)
        db.commit()
    return created


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    if seed():
        print('Seed data inserted.')
    else:
        print('Seed data already present.')
