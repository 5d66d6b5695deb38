"""
Pydantic schemas for the hotel, booking and back-office APIs
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator, model_validator
from tropicana.models.enums import (
    PropertyType, RoomCategory, RoomStatus, HousekeepingStatus,
    ReservationStatus, ReservationSource, ReservationPaymentStatus,
    PaymentStatus, PaymentMethod, WebhookEventStatus,
    ServiceCategory, TaskPriority, ServiceStatus, UserStatus
)

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ============== Property ==============

class PropertyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=150)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    property_type: PropertyType
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=300)
    address: Optional[str] = None
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = None
    country: str = "Philippines"
    postal_code: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    primary_currency: str = Field("PHP", min_length=3, max_length=3)
    secondary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: str = "Asia/Manila"
    locale: str = "en"
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=1)
    service_fee_rate: Optional[Decimal] = Field(None, ge=0, le=1)
    logo: Optional[str] = None
    favicon: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    secondary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    hero_image: Optional[str] = None
    check_in_time: str = Field("15:00", pattern=TIME_PATTERN)
    check_out_time: str = Field("12:00", pattern=TIME_PATTERN)
    cancellation_hours: int = Field(24, ge=0, le=168)
    max_advance_booking: int = Field(365, ge=1, le=730)
    is_published: bool = False
    is_featured: bool = False
    sort_order: int = 0
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    is_active: bool = True


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=150)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    property_type: Optional[PropertyType] = None
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=300)
    address: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    primary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    secondary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None
    locale: Optional[str] = None
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=1)
    service_fee_rate: Optional[Decimal] = Field(None, ge=0, le=1)
    logo: Optional[str] = None
    favicon: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    secondary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    hero_image: Optional[str] = None
    check_in_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    check_out_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    cancellation_hours: Optional[int] = Field(None, ge=0, le=168)
    max_advance_booking: Optional[int] = Field(None, ge=1, le=730)
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    is_active: Optional[bool] = None


class PropertyResponse(PropertyBase):
    id: int
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyCounts(BaseModel):
    rooms: int = 0
    room_types: int = 0
    reservations: int = 0
    guests: int = 0


class PropertyListItem(PropertyResponse):
    counts: PropertyCounts


# ============== Room type & amenity ==============

class AmenityBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True
    is_chargeable: bool = False
    charge_amount: Optional[Decimal] = Field(None, ge=0)
    sort_order: int = 0


class AmenityCreate(AmenityBase):
    property_id: int


class AmenityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None
    is_chargeable: Optional[bool] = None
    charge_amount: Optional[Decimal] = Field(None, ge=0)
    sort_order: Optional[int] = None


class AmenityResponse(AmenityBase):
    id: int
    property_id: int

    model_config = ConfigDict(from_attributes=True)


class AmenityLink(BaseModel):
    amenity_id: int


class RoomTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=150)
    category: RoomCategory = RoomCategory.STANDARD
    description: Optional[str] = None
    base_rate: Decimal = Field(..., gt=0)
    max_occupancy: int = Field(2, ge=1)
    max_adults: int = Field(2, ge=1)
    max_children: int = Field(1, ge=0)
    max_infants: int = Field(1, ge=0)
    bed_configuration: Optional[str] = None
    room_size: Optional[float] = Field(None, gt=0)
    has_balcony: bool = False
    has_ocean_view: bool = False
    has_pool_view: bool = False
    has_kitchenette: bool = False
    has_living_area: bool = False
    smoking_allowed: bool = False
    pet_friendly: bool = False
    is_accessible: bool = False
    extra_person_rate: Optional[Decimal] = Field(None, ge=0)
    extra_child_rate: Optional[Decimal] = Field(None, ge=0)
    primary_image: Optional[str] = None
    images: List[str] = []
    floor_plan: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


class RoomTypeCreate(RoomTypeBase):
    pass


class RoomTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=150)
    category: Optional[RoomCategory] = None
    description: Optional[str] = None
    base_rate: Optional[Decimal] = Field(None, gt=0)
    max_occupancy: Optional[int] = Field(None, ge=1)
    max_adults: Optional[int] = Field(None, ge=1)
    max_children: Optional[int] = Field(None, ge=0)
    max_infants: Optional[int] = Field(None, ge=0)
    bed_configuration: Optional[str] = None
    room_size: Optional[float] = Field(None, gt=0)
    has_balcony: Optional[bool] = None
    has_ocean_view: Optional[bool] = None
    has_pool_view: Optional[bool] = None
    has_kitchenette: Optional[bool] = None
    has_living_area: Optional[bool] = None
    smoking_allowed: Optional[bool] = None
    pet_friendly: Optional[bool] = None
    is_accessible: Optional[bool] = None
    extra_person_rate: Optional[Decimal] = Field(None, ge=0)
    extra_child_rate: Optional[Decimal] = Field(None, ge=0)
    primary_image: Optional[str] = None
    images: Optional[List[str]] = None
    floor_plan: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class RoomTypeResponse(RoomTypeBase):
    id: int
    property_id: int
    images: Optional[List[str]] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomTypeWithCounts(RoomTypeResponse):
    room_count: int = 0
    amenities: List[AmenityResponse] = []


# ============== Room ==============

class RoomBase(BaseModel):
    room_type_id: int
    room_number: str = Field(..., min_length=1, max_length=20)
    floor: Optional[int] = None
    wing: Optional[str] = None
    status: RoomStatus = RoomStatus.AVAILABLE
    housekeeping: HousekeepingStatus = HousekeepingStatus.CLEAN
    last_cleaned: Optional[datetime] = None
    notes: Optional[str] = None
    special_features: List[str] = []
    is_active: bool = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    room_type_id: Optional[int] = None
    room_number: Optional[str] = Field(None, min_length=1, max_length=20)
    floor: Optional[int] = None
    wing: Optional[str] = None
    status: Optional[RoomStatus] = None
    housekeeping: Optional[HousekeepingStatus] = None
    last_cleaned: Optional[datetime] = None
    last_inspected: Optional[datetime] = None
    last_maintenance: Optional[datetime] = None
    out_of_order_until: Optional[datetime] = None
    notes: Optional[str] = None
    special_features: Optional[List[str]] = None
    is_active: Optional[bool] = None


class RoomResponse(RoomBase):
    id: int
    property_id: int
    room_type_name: Optional[str] = None
    special_features: Optional[List[str]] = []
    last_inspected: Optional[datetime] = None
    last_maintenance: Optional[datetime] = None
    out_of_order_until: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Rates & pricing ==============

class RoomRateBase(BaseModel):
    room_type_id: int
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    base_rate: Decimal = Field(..., gt=0)
    currency: str = Field("PHP", min_length=3, max_length=3)
    valid_from: date
    valid_to: date
    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = True
    sunday: bool = True
    min_stay: int = Field(1, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    min_advance: Optional[int] = Field(None, ge=0)
    max_advance: Optional[int] = Field(None, ge=0)
    extra_person_rate: Optional[Decimal] = Field(None, ge=0)
    child_rate: Optional[Decimal] = Field(None, ge=0)
    is_active: bool = True
    priority: int = 0


class RoomRateCreate(RoomRateBase):

    @model_validator(mode="after")
    def check_ranges(self):
        if self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be before valid_from")
        if self.max_stay is not None and self.max_stay < self.min_stay:
            raise ValueError("max_stay must not be less than min_stay")
        return self


class RoomRateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    base_rate: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    monday: Optional[bool] = None
    tuesday: Optional[bool] = None
    wednesday: Optional[bool] = None
    thursday: Optional[bool] = None
    friday: Optional[bool] = None
    saturday: Optional[bool] = None
    sunday: Optional[bool] = None
    min_stay: Optional[int] = Field(None, ge=1)
    max_stay: Optional[int] = Field(None, ge=1)
    min_advance: Optional[int] = Field(None, ge=0)
    max_advance: Optional[int] = Field(None, ge=0)
    extra_person_rate: Optional[Decimal] = Field(None, ge=0)
    child_rate: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class RoomRateResponse(RoomRateBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NightlyRate(BaseModel):
    night: date
    rate: Decimal
    rate_id: Optional[int] = None
    rate_name: Optional[str] = None


class PriceQuote(BaseModel):
    room_type_id: int
    check_in: date
    check_out: date
    nights: int
    currency: str
    nightly_rates: List[NightlyRate]
    subtotal: Decimal
    taxes: Decimal
    service_fee: Decimal
    total_amount: Decimal


# ============== Availability ==============

class AvailableRoomType(BaseModel):
    room_type_id: int
    name: str
    display_name: str
    category: RoomCategory
    description: Optional[str] = None
    base_rate: Decimal
    max_occupancy: int
    max_adults: int
    max_children: int
    bed_configuration: Optional[str] = None
    room_size: Optional[float] = None
    primary_image: Optional[str] = None
    images: List[str] = []
    total_rooms: int
    booked_rooms: int
    available_count: int


class AvailabilityResponse(BaseModel):
    property_id: int
    check_in: date
    check_out: date
    nights: int
    adults: int
    children: int
    room_types: List[AvailableRoomType]


# ============== Guest ==============

class GuestBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    title: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = None
    passport_number: Optional[str] = None
    id_number: Optional[str] = None
    id_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    vip_status: bool = False
    loyalty_number: Optional[str] = None
    preferences: Dict[str, Any] = {}
    notes: Optional[str] = None
    marketing_opt_in: bool = False
    source: Optional[str] = None


class GuestCreate(GuestBase):
    property_id: int


class GuestUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    title: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = None
    passport_number: Optional[str] = None
    id_number: Optional[str] = None
    id_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    vip_status: Optional[bool] = None
    loyalty_number: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    marketing_opt_in: Optional[bool] = None


class GuestResponse(GuestBase):
    id: int
    property_id: int
    email: str
    preferences: Optional[Dict[str, Any]] = {}
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestBrief(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ============== Reservation ==============

class ReservationRoomInput(BaseModel):
    room_type_id: int
    room_id: Optional[int] = None
    rate: Decimal = Field(..., gt=0)


class ReservationRoomResponse(BaseModel):
    id: int
    room_type_id: int
    room_type_name: Optional[str] = None
    room_id: Optional[int] = None
    room_number: Optional[str] = None
    rate: Decimal
    nights: int
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class ReservationCreate(BaseModel):
    property_id: int
    guest_id: int
    check_in: date
    check_out: date
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    rooms: List[ReservationRoomInput] = Field(..., min_length=1)
    taxes: Optional[Decimal] = Field(None, ge=0)
    service_fee: Optional[Decimal] = Field(None, ge=0)
    discounts: Decimal = Field(Decimal("0"), ge=0)
    source: ReservationSource = ReservationSource.ADMIN
    status: ReservationStatus = ReservationStatus.PENDING
    special_requests: Optional[str] = None
    guest_notes: Optional[str] = None
    internal_notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class ReservationUpdate(BaseModel):
    status: Optional[ReservationStatus] = None
    payment_status: Optional[ReservationPaymentStatus] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    adults: Optional[int] = Field(None, ge=1)
    children: Optional[int] = Field(None, ge=0)
    infants: Optional[int] = Field(None, ge=0)
    subtotal: Optional[Decimal] = Field(None, ge=0)
    taxes: Optional[Decimal] = Field(None, ge=0)
    service_fee: Optional[Decimal] = Field(None, ge=0)
    discounts: Optional[Decimal] = Field(None, ge=0)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    cancellation_reason: Optional[str] = None
    special_requests: Optional[str] = None
    guest_notes: Optional[str] = None
    internal_notes: Optional[str] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        # These columns are NOT NULL; they may be omitted but not cleared
        required = (
            "status", "payment_status", "check_in", "check_out", "adults", "children", "infants",
            "subtotal", "taxes", "service_fee", "discounts", "total_amount",
        )
        cleared = [name for name in required if name in self.model_fields_set and getattr(self, name) is None]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class ReservationCancel(BaseModel):
    reason: Optional[str] = None


class ReservationResponse(BaseModel):
    id: int
    property_id: int
    guest_id: int
    confirmation_number: str
    source: ReservationSource
    status: ReservationStatus
    check_in: date
    check_out: date
    nights: int
    adults: int
    children: int
    infants: int
    subtotal: Decimal
    taxes: Decimal
    service_fee: Decimal
    discounts: Decimal
    total_amount: Decimal
    currency: Optional[str] = None
    payment_status: ReservationPaymentStatus
    payment_provider: Optional[str] = None
    payment_intent_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    special_requests: Optional[str] = None
    guest_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    property_name: Optional[str] = None
    guest: Optional[GuestBrief] = None
    rooms: List[ReservationRoomResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PropertyDetail(PropertyResponse):
    counts: PropertyCounts
    room_types: List[RoomTypeWithCounts] = []
    rooms: List[RoomResponse] = []
    recent_reservations: List[ReservationResponse] = []


class ReservationStatusView(BaseModel):
    """Public, guest-facing reservation status"""
    id: int
    confirmation_number: str
    status: ReservationStatus
    payment_status: ReservationPaymentStatus
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    check_in: date
    check_out: date
    total_amount: Decimal
    currency: Optional[str] = None
    guest: Dict[str, Any]
    property: Dict[str, Any]
    room_type: Optional[Dict[str, Any]] = None


# ============== Public booking ==============

class BookingRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    check_in: date
    check_out: date
    adults: int = Field(..., ge=1)
    children: int = Field(0, ge=0)
    property_id: int
    room_type_id: int
    special_requests: Optional[str] = None
    guest_notes: Optional[str] = None
    # Client-side figures are checked against the server quote
    nights: Optional[int] = Field(None, ge=1)
    subtotal: Optional[Decimal] = Field(None, ge=0)
    taxes: Optional[Decimal] = Field(None, ge=0)
    service_fee: Optional[Decimal] = Field(None, ge=0)
    total_amount: Optional[Decimal] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingResponse(BaseModel):
    reservation_id: int
    confirmation_number: str
    checkout_url: str
    payment_session_id: str


# ============== Payment ==============

class PaymentIntentRequest(BaseModel):
    reservation_id: int


class PaymentIntentResponse(BaseModel):
    client_key: Optional[str] = None
    payment_intent_id: str


class ManualPaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    provider_ref: Optional[str] = None
    notes: Optional[str] = None


class RefundRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    reason: Optional[str] = None
    provider_refund_id: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    reservation_id: int
    amount: Decimal
    currency: Optional[str] = None
    method: PaymentMethod
    status: PaymentStatus
    provider: Optional[str] = None
    provider_payment_id: Optional[str] = None
    provider_ref: Optional[str] = None
    checkout_session_id: Optional[str] = None
    payment_flow: Optional[str] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    refunded_amount: Decimal
    refund_reason: Optional[str] = None
    refund_id: Optional[str] = None
    refunded_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentStatusSummary(BaseModel):
    status: str
    total_paid: Decimal
    latest_payment: Optional[PaymentResponse] = None
    payments: List[PaymentResponse] = []


class ReservationDetail(ReservationResponse):
    payments: List[PaymentResponse] = []


class WebhookEventResponse(BaseModel):
    id: int
    provider: str
    event_id: str
    event_type: str
    resource_id: Optional[str] = None
    status: WebhookEventStatus
    processed: bool
    retry_count: int
    next_retry_at: Optional[datetime] = None
    error: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Stay ==============

class StayChargeCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    unit_price: Decimal = Field(..., gt=0)
    amount: Optional[Decimal] = Field(None, gt=0)
    department: Optional[str] = None
    reference: Optional[str] = None


class StayChargeResponse(BaseModel):
    id: int
    stay_id: int
    description: str
    quantity: int
    unit_price: Decimal
    amount: Decimal
    department: Optional[str] = None
    reference: Optional[str] = None
    charged_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StayResponse(BaseModel):
    id: int
    reservation_id: int
    guest_id: int
    actual_check_in: datetime
    actual_check_out: Optional[datetime] = None
    room_charges: Decimal
    extra_charges: Decimal
    total_charges: Decimal
    notes: Optional[str] = None
    is_active: bool
    guest: Optional[GuestBrief] = None

    model_config = ConfigDict(from_attributes=True)


class CheckInRequest(BaseModel):
    notes: Optional[str] = None


class CheckOutRequest(BaseModel):
    notes: Optional[str] = None


# ============== Task & service request ==============

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: ServiceCategory = ServiceCategory.OTHER
    priority: TaskPriority = TaskPriority.NORMAL
    property_id: Optional[int] = None
    room_id: Optional[int] = None
    assigned_to: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    notes: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[ServiceCategory] = None
    priority: Optional[TaskPriority] = None
    status: Optional[ServiceStatus] = None
    room_id: Optional[int] = None
    assigned_to: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: ServiceCategory
    priority: TaskPriority
    status: ServiceStatus
    property_id: Optional[int] = None
    room_id: Optional[int] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    due_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceRequestCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: ServiceCategory = ServiceCategory.OTHER
    priority: TaskPriority = TaskPriority.NORMAL
    property_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None


class ServiceRequestUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[ServiceCategory] = None
    priority: Optional[TaskPriority] = None
    status: Optional[ServiceStatus] = None
    assigned_to: Optional[int] = None
    staff_notes: Optional[str] = None
    completed_at: Optional[datetime] = None


class ServiceRequestResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: ServiceCategory
    priority: TaskPriority
    status: ServiceStatus
    property_id: Optional[int] = None
    guest_id: Optional[int] = None
    room_id: Optional[int] = None
    assigned_to: Optional[int] = None
    staff_notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Users, roles & auth ==============

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PasswordChange(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=6)


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    status: UserStatus = UserStatus.ACTIVE
    phone: Optional[str] = None
    avatar: Optional[str] = None
    timezone: str = "Asia/Manila"
    locale: str = "en"


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[UserStatus] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class RoleAssignmentCreate(BaseModel):
    role_id: int
    property_id: Optional[int] = None


class RoleAssignmentResponse(BaseModel):
    id: int
    role_id: int
    role_name: Optional[str] = None
    property_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    status: UserStatus
    phone: Optional[str] = None
    avatar: Optional[str] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None
    last_login_at: Optional[datetime] = None
    role_names: List[str] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    is_system: bool = False

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: str) -> str:
        return v.strip().upper()


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class RoleResponse(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    is_system: bool
    user_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Analytics ==============

class DashboardStats(BaseModel):
    total_properties: int
    total_rooms: int
    total_guests: int
    rooms_by_status: Dict[str, int]
    occupancy_rate: float
    today_arrivals: int
    today_departures: int
    reservations_by_status: Dict[str, int]
    revenue_last_30_days: Decimal
    recent_reservations: List[ReservationResponse]


class RevenuePoint(BaseModel):
    day: date
    revenue: Decimal
    payments: int
