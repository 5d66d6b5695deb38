"""
Pydantic schemas for website content management
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator, model_validator
from tropicana.models.enums import (
    PublishStatus, PageTemplate, ContentType, ContentScope, MediaCategory,
    OfferType, OfferStatus, FeedbackCategory, FeedbackSentiment,
    FeedbackPriority, FeedbackStatus
)
from tropicana.models.schemas import (
    SLUG_PATTERN, HEX_COLOR_PATTERN, PropertyResponse, RoomTypeResponse, AmenityResponse
)


# ============== Media ==============

class MediaUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    alt_text: Optional[str] = Field(None, max_length=255)
    caption: Optional[str] = Field(None, max_length=255)
    category: Optional[MediaCategory] = None
    tags: Optional[List[str]] = None
    scope: Optional[ContentScope] = None
    property_id: Optional[int] = None


class MediaResponse(BaseModel):
    id: int
    filename: str
    original_name: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    category: MediaCategory
    tags: Optional[List[str]] = []
    scope: ContentScope
    property_id: Optional[int] = None
    uploaded_by: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Page ==============

class PageBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    content_type: ContentType = ContentType.PAGE
    template: PageTemplate = PageTemplate.DEFAULT
    is_home_page: bool = False
    parent_id: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    status: PublishStatus = PublishStatus.DRAFT
    scheduled_for: Optional[datetime] = None
    is_public: bool = True
    requires_auth: bool = False
    locale: str = "en"
    featured_image_id: Optional[int] = None


class PageCreate(PageBase):
    pass


class PageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    content_type: Optional[ContentType] = None
    template: Optional[PageTemplate] = None
    is_home_page: Optional[bool] = None
    parent_id: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    status: Optional[PublishStatus] = None
    scheduled_for: Optional[datetime] = None
    is_public: Optional[bool] = None
    requires_auth: Optional[bool] = None
    locale: Optional[str] = None
    featured_image_id: Optional[int] = None


class PageResponse(PageBase):
    id: int
    published_at: Optional[datetime] = None
    author_id: Optional[int] = None
    editor_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Blog ==============

class BlogPostBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    status: PublishStatus = PublishStatus.DRAFT
    scheduled_for: Optional[datetime] = None
    categories: List[str] = []
    tags: List[str] = []
    reading_time: Optional[int] = Field(None, ge=1)
    locale: str = "en"
    featured_image_id: Optional[int] = None


class BlogPostCreate(BlogPostBase):
    pass


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    status: Optional[PublishStatus] = None
    scheduled_for: Optional[datetime] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    reading_time: Optional[int] = Field(None, ge=1)
    locale: Optional[str] = None
    featured_image_id: Optional[int] = None


class BlogPostResponse(BlogPostBase):
    id: int
    categories: Optional[List[str]] = []
    tags: Optional[List[str]] = []
    published_at: Optional[datetime] = None
    view_count: int = 0
    author_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Navigation ==============

class NavigationItemBase(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)
    url: Optional[str] = None
    page_id: Optional[int] = None
    target: str = "_self"
    css_class: Optional[str] = None
    parent_id: Optional[int] = None
    sort_order: int = 0
    is_active: bool = True


class NavigationItemCreate(NavigationItemBase):

    @model_validator(mode="after")
    def needs_destination(self):
        if not self.url and not self.page_id:
            raise ValueError("Either url or page_id is required")
        return self


class NavigationItemUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    url: Optional[str] = None
    page_id: Optional[int] = None
    target: Optional[str] = None
    css_class: Optional[str] = None
    parent_id: Optional[int] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class NavigationItemResponse(NavigationItemBase):
    id: int
    menu_id: int

    model_config = ConfigDict(from_attributes=True)


class NavigationMenuBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    location: Optional[str] = None
    is_active: bool = True


class NavigationMenuCreate(NavigationMenuBase):
    pass


class NavigationMenuUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    location: Optional[str] = None
    is_active: Optional[bool] = None


class NavigationMenuResponse(NavigationMenuBase):
    id: int
    created_by: Optional[int] = None
    items: List[NavigationItemResponse] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Special offer ==============

class SpecialOfferBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=300)
    type: OfferType = OfferType.PACKAGE
    offer_price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    currency: str = Field("PHP", min_length=3, max_length=3)
    valid_from: date
    valid_to: date
    booking_deadline: Optional[date] = None
    min_nights: int = Field(1, ge=1)
    promo_code: Optional[str] = None
    inclusions: List[str] = []
    exclusions: List[str] = []
    terms: Optional[str] = None
    image: Optional[str] = None
    status: OfferStatus = OfferStatus.ACTIVE
    is_published: bool = False
    is_featured: bool = False
    sort_order: int = 0


class SpecialOfferCreate(SpecialOfferBase):
    property_id: int

    @model_validator(mode="after")
    def check_validity(self):
        if self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be before valid_from")
        return self


class SpecialOfferUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=300)
    type: Optional[OfferType] = None
    offer_price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    booking_deadline: Optional[date] = None
    min_nights: Optional[int] = Field(None, ge=1)
    promo_code: Optional[str] = None
    inclusions: Optional[List[str]] = None
    exclusions: Optional[List[str]] = None
    terms: Optional[str] = None
    image: Optional[str] = None
    status: Optional[OfferStatus] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None


class SpecialOfferResponse(SpecialOfferBase):
    id: int
    property_id: int
    inclusions: Optional[List[str]] = []
    exclusions: Optional[List[str]] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Testimonial & FAQ ==============

class TestimonialBase(BaseModel):
    guest_name: str = Field(..., min_length=1, max_length=100)
    guest_title: Optional[str] = None
    guest_country: Optional[str] = None
    content: str = Field(..., min_length=1)
    rating: int = Field(5, ge=1, le=5)
    source: Optional[str] = None
    property_id: Optional[int] = None
    is_active: bool = True
    is_featured: bool = False
    sort_order: int = 0


class TestimonialCreate(TestimonialBase):
    pass


class TestimonialUpdate(BaseModel):
    guest_name: Optional[str] = Field(None, min_length=1, max_length=100)
    guest_title: Optional[str] = None
    guest_country: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)
    source: Optional[str] = None
    property_id: Optional[int] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None


class TestimonialResponse(TestimonialBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FAQBase(BaseModel):
    question: str = Field(..., min_length=1, max_length=500)
    answer: str = Field(..., min_length=1)
    category: Optional[str] = None
    property_id: Optional[int] = None
    is_active: bool = True
    sort_order: int = 0


class FAQCreate(FAQBase):
    pass


class FAQUpdate(BaseModel):
    question: Optional[str] = Field(None, min_length=1, max_length=500)
    answer: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    property_id: Optional[int] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class FAQResponse(FAQBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Feedback ==============

class FeedbackCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    property_id: Optional[int] = None
    category: FeedbackCategory = FeedbackCategory.GENERAL_INQUIRY
    sentiment: FeedbackSentiment = FeedbackSentiment.NEUTRAL
    priority: FeedbackPriority = FeedbackPriority.MEDIUM


class FeedbackUpdate(BaseModel):
    category: Optional[FeedbackCategory] = None
    sentiment: Optional[FeedbackSentiment] = None
    priority: Optional[FeedbackPriority] = None
    status: Optional[FeedbackStatus] = None
    response: Optional[str] = None


class FeedbackResponse(BaseModel):
    id: int
    content: str
    name: Optional[str] = None
    email: Optional[str] = None
    property_id: Optional[int] = None
    category: FeedbackCategory
    sentiment: FeedbackSentiment
    priority: FeedbackPriority
    status: FeedbackStatus
    response: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Website configuration ==============

_BLANK_TO_NONE = (
    "primary_email", "primary_phone", "headquarters",
    "facebook_url", "instagram_url", "twitter_url", "linkedin_url", "youtube_url",
    "logo", "favicon", "primary_color", "secondary_color", "accent_color",
)


class WebsiteConfigurationFields(BaseModel):
    tagline: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    primary_email: Optional[EmailStr] = None
    primary_phone: Optional[str] = None
    headquarters: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    twitter_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    secondary_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    accent_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    @field_validator(*_BLANK_TO_NONE, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class WebsiteConfigurationCreate(WebsiteConfigurationFields):
    site_name: str = Field(..., min_length=1, max_length=100)
    company_name: str = Field(..., min_length=1, max_length=150)
    default_currency: str = Field("PHP", min_length=3, max_length=3)
    default_timezone: str = "Asia/Manila"
    date_format: str = "MM/dd/yyyy"
    time_format: str = "12h"
    maintenance_mode: bool = False
    debug_mode: bool = False
    email_notifications: bool = True
    booking_alerts: bool = True
    maintenance_alerts: bool = True
    two_factor_required: bool = False
    session_duration: int = Field(480, ge=30, le=1440)


class WebsiteConfigurationUpdate(WebsiteConfigurationFields):
    site_name: Optional[str] = Field(None, min_length=1, max_length=100)
    company_name: Optional[str] = Field(None, min_length=1, max_length=150)
    default_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    default_timezone: Optional[str] = None
    date_format: Optional[str] = None
    time_format: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    debug_mode: Optional[bool] = None
    email_notifications: Optional[bool] = None
    booking_alerts: Optional[bool] = None
    maintenance_alerts: Optional[bool] = None
    two_factor_required: Optional[bool] = None
    session_duration: Optional[int] = Field(None, ge=30, le=1440)


class WebsiteConfigurationResponse(WebsiteConfigurationCreate):
    id: int
    primary_email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Public site ==============

class PublicRoomType(RoomTypeResponse):
    amenities: List[AmenityResponse] = []
    starting_rate: Decimal


class PropertyPolicies(BaseModel):
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    cancellation_hours: Optional[int] = None


class PublicRoomTypeDetail(PublicRoomType):
    policies: PropertyPolicies


class PublicPropertyDetail(PropertyResponse):
    room_types: List[PublicRoomType] = []
    amenity_names: List[str] = []
    offers: List[SpecialOfferResponse] = []


class PublicHome(BaseModel):
    config: Optional[WebsiteConfigurationResponse] = None
    home_page: Optional[PageResponse] = None
    featured_properties: List[PropertyResponse] = []
    featured_offers: List[SpecialOfferResponse] = []
    testimonials: List[TestimonialResponse] = []
    faqs: List[FAQResponse] = []
