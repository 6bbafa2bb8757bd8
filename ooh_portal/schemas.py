from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from ooh_portal.errors import FieldValidationError
from ooh_portal.models import (
    BookingStatus,
    CampaignStatus,
    DocumentStatus,
    DocumentType,
    InventoryStatus,
    InvoiceStatus,
    UserRole,
)

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2, ge=0)]
Rate = Annotated[Decimal, Field(max_digits=10, decimal_places=2, ge=0)]
Count = Annotated[int, Field(ge=0)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiUpdateModel(ApiModel):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        for name, value in data.items():
            if value is None and name in self.NON_NULLABLE:
                raise FieldValidationError(to_camel(name), 'Field cannot be null')
        return data


# Auth


class LoginRequest(ApiModel):
    username: RequiredText
    password: Annotated[str, StringConstraints(min_length=1)]


# Users


class UserCreate(ApiModel):
    username: RequiredText
    password: Annotated[str, StringConstraints(min_length=1)]
    full_name: RequiredText
    email: RequiredText
    role: UserRole = UserRole.CAMPAIGN_PLANNER
    supplier_id: str | None = None
    active: bool = True


class UserUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'username', 'password', 'full_name', 'email', 'role', 'active'})

    username: RequiredText | None = None
    password: Annotated[str, StringConstraints(min_length=1)] | None = None
    full_name: RequiredText | None = None
    email: RequiredText | None = None
    role: UserRole | None = None
    supplier_id: str | None = None
    active: bool | None = None


class UserRead(ApiModel):
    id: str
    username: str
    full_name: str
    email: str
    role: UserRole
    supplier_id: str | None
    active: bool


class LoginResponse(UserRead):
    token: str


# Suppliers


class SupplierCreate(ApiModel):
    name: RequiredText
    contact_person: RequiredText
    email: RequiredText
    phone: str | None = None
    address: str | None = None
    active: bool = True


class SupplierUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'name', 'contact_person', 'email', 'active'})

    name: RequiredText | None = None
    contact_person: RequiredText | None = None
    email: RequiredText | None = None
    phone: str | None = None
    address: str | None = None
    active: bool | None = None


class SupplierRead(ApiModel):
    id: str
    name: str
    contact_person: str
    email: str
    phone: str | None
    address: str | None
    active: bool


# Campaigns


class CampaignCreate(ApiModel):
    name: RequiredText
    description: str | None = None
    status: CampaignStatus = CampaignStatus.DRAFT
    budget: Money | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    region: str | None = None
    target_reach: Count | None = None


class CampaignUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'name', 'status'})

    name: RequiredText | None = None
    description: str | None = None
    status: CampaignStatus | None = None
    budget: Money | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    region: str | None = None
    target_reach: Count | None = None


class CampaignRead(ApiModel):
    id: str
    name: str
    description: str | None
    status: CampaignStatus
    budget: Decimal | None
    start_date: datetime | None
    end_date: datetime | None
    region: str | None
    target_reach: int | None
    created_by: str
    created_at: datetime


# Bookings


class BookingCreate(ApiModel):
    campaign_id: RequiredText
    supplier_id: RequiredText
    site_description: RequiredText
    location: str | None = None
    media_type: str | None = None
    cost: Money | None = None
    status: BookingStatus = BookingStatus.PENDING
    start_date: datetime | None = None
    end_date: datetime | None = None


class BookingUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'campaign_id', 'supplier_id', 'site_description', 'status'})

    campaign_id: RequiredText | None = None
    supplier_id: RequiredText | None = None
    site_description: RequiredText | None = None
    location: str | None = None
    media_type: str | None = None
    cost: Money | None = None
    status: BookingStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class BookingRead(ApiModel):
    id: str
    campaign_id: str
    supplier_id: str
    site_description: str
    location: str | None
    media_type: str | None
    cost: Decimal | None
    status: BookingStatus
    start_date: datetime | None
    end_date: datetime | None
    created_at: datetime


# Documents


class DocumentCreate(ApiModel):
    campaign_id: str | None = None
    booking_id: str | None = None
    type: DocumentType
    file_name: RequiredText
    file_size: Count
    mime_type: str | None = None
    status: DocumentStatus = DocumentStatus.UPLOADED
    gps_latitude: str | None = None
    gps_longitude: str | None = None
    captured_at: datetime | None = None


class DocumentUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'type', 'file_name', 'file_size', 'status'})

    campaign_id: str | None = None
    booking_id: str | None = None
    type: DocumentType | None = None
    file_name: RequiredText | None = None
    file_size: Count | None = None
    mime_type: str | None = None
    status: DocumentStatus | None = None
    gps_latitude: str | None = None
    gps_longitude: str | None = None
    captured_at: datetime | None = None


class DocumentRead(ApiModel):
    id: str
    campaign_id: str | None
    booking_id: str | None
    type: DocumentType
    file_name: str
    file_size: int
    mime_type: str | None
    status: DocumentStatus
    gps_latitude: str | None
    gps_longitude: str | None
    captured_at: datetime | None
    uploaded_by: str
    uploaded_at: datetime


# Invoices


class InvoiceCreate(ApiModel):
    campaign_id: RequiredText
    supplier_id: str | None = None
    invoice_number: RequiredText
    amount: Money
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issued_at: datetime | None = None
    due_date: datetime | None = None


class InvoiceUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset({'campaign_id', 'invoice_number', 'amount', 'status'})

    campaign_id: RequiredText | None = None
    supplier_id: str | None = None
    invoice_number: RequiredText | None = None
    amount: Money | None = None
    status: InvoiceStatus | None = None
    issued_at: datetime | None = None
    due_date: datetime | None = None


class InvoiceRead(ApiModel):
    id: str
    campaign_id: str
    supplier_id: str | None
    invoice_number: str
    amount: Decimal
    status: InvoiceStatus
    issued_at: datetime | None
    due_date: datetime | None
    created_at: datetime


# Inventory


class InventoryCreate(ApiModel):
    # Required for department roles; supplier roles get their own affiliation stamped.
    supplier_id: str | None = None
    screen_name: RequiredText
    screen_type: RequiredText
    location: RequiredText
    region: RequiredText
    gps_latitude: str | None = None
    gps_longitude: str | None = None
    dimensions: str | None = None
    resolution: str | None = None
    facing: str | None = None
    daily_rate: Rate
    weekly_rate: Rate | None = None
    monthly_rate: Money | None = None
    status: InventoryStatus = InventoryStatus.AVAILABLE
    available_from: datetime | None = None
    available_to: datetime | None = None
    illuminated: bool = False
    digital: bool = False
    traffic_count: Count | None = None
    notes: str | None = None
    active: bool = True


class InventoryUpdate(ApiUpdateModel):
    NON_NULLABLE = frozenset(
        {
            'screen_name',
            'screen_type',
            'location',
            'region',
            'daily_rate',
            'status',
            'illuminated',
            'digital',
            'active',
        }
    )

    supplier_id: str | None = None
    screen_name: RequiredText | None = None
    screen_type: RequiredText | None = None
    location: RequiredText | None = None
    region: RequiredText | None = None
    gps_latitude: str | None = None
    gps_longitude: str | None = None
    dimensions: str | None = None
    resolution: str | None = None
    facing: str | None = None
    daily_rate: Rate | None = None
    weekly_rate: Rate | None = None
    monthly_rate: Money | None = None
    status: InventoryStatus | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None
    illuminated: bool | None = None
    digital: bool | None = None
    traffic_count: Count | None = None
    notes: str | None = None
    active: bool | None = None


class InventoryRead(ApiModel):
    id: str
    supplier_id: str
    screen_name: str
    screen_type: str
    location: str
    region: str
    gps_latitude: str | None
    gps_longitude: str | None
    dimensions: str | None
    resolution: str | None
    facing: str | None
    daily_rate: Decimal
    weekly_rate: Decimal | None
    monthly_rate: Decimal | None
    status: InventoryStatus
    available_from: datetime | None
    available_to: datetime | None
    illuminated: bool
    digital: bool
    traffic_count: int | None
    notes: str | None
    active: bool
    updated_at: datetime


# Dashboard / audit


class DashboardStats(ApiModel):
    total_campaigns: int
    active_campaigns: int
    total_bookings: int
    total_spend: str
    pending_bookings: int
    completed_bookings: int


class AuditLogRead(ApiModel):
    id: int
    actor_user_id: str | None
    action: str
    entity_type: str | None
    entity_id: str | None
    meta: dict
    created_at: datetime
