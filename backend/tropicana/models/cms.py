"""
Website content models
Pages, blog posts, media, navigation, offers, testimonials, FAQs, feedback
and the site-wide configuration record
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Boolean, Numeric, JSON, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from tropicana.database import Base
from tropicana.models.enums import (
    PublishStatus, PageTemplate, ContentType, ContentScope, MediaCategory,
    OfferType, OfferStatus, FeedbackCategory, FeedbackSentiment,
    FeedbackPriority, FeedbackStatus
)


class Media(Base):
    """Uploaded file"""
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100))
    size = Column(Integer)
    url = Column(String(500), nullable=False)
    title = Column(String(200))
    description = Column(Text)
    alt_text = Column(String(255))
    caption = Column(String(255))
    category = Column(SQLEnum(MediaCategory), default=MediaCategory.GENERAL, nullable=False)
    tags = Column(JSON, default=list)
    scope = Column(SQLEnum(ContentScope), default=ContentScope.GLOBAL, nullable=False)
    property_id = Column(Integer, ForeignKey("properties.id"))
    uploaded_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Page(Base):
    """CMS page"""
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    content = Column(Text)
    excerpt = Column(Text)
    content_type = Column(SQLEnum(ContentType), default=ContentType.PAGE, nullable=False)
    template = Column(SQLEnum(PageTemplate), default=PageTemplate.DEFAULT, nullable=False)
    is_home_page = Column(Boolean, default=False)
    parent_id = Column(Integer, ForeignKey("pages.id"))
    meta_title = Column(String(60))
    meta_description = Column(String(160))
    meta_keywords = Column(String(255))
    canonical_url = Column(String(500))
    status = Column(SQLEnum(PublishStatus), default=PublishStatus.DRAFT, nullable=False)
    published_at = Column(DateTime)
    scheduled_for = Column(DateTime)
    is_public = Column(Boolean, default=True)
    requires_auth = Column(Boolean, default=False)
    locale = Column(String(10), default="en")
    featured_image_id = Column(Integer, ForeignKey("media.id"))
    author_id = Column(Integer, ForeignKey("users.id"))
    editor_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    parent = relationship("Page", remote_side=[id])
    featured_image = relationship("Media")


class BlogPost(Base):
    """Blog post"""
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    meta_title = Column(String(60))
    meta_description = Column(String(160))
    status = Column(SQLEnum(PublishStatus), default=PublishStatus.DRAFT, nullable=False)
    published_at = Column(DateTime)
    scheduled_for = Column(DateTime)
    categories = Column(JSON, default=list)
    tags = Column(JSON, default=list)
    reading_time = Column(Integer)
    view_count = Column(Integer, default=0)
    locale = Column(String(10), default="en")
    featured_image_id = Column(Integer, ForeignKey("media.id"))
    author_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    featured_image = relationship("Media")


class NavigationMenu(Base):
    """Named navigation menu (header, footer, ...)"""
    __tablename__ = "navigation_menus"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text)
    location = Column(String(50))
    is_active = Column(Boolean, default=True)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("NavigationItem", back_populates="menu", cascade="all, delete-orphan",
                         order_by="NavigationItem.sort_order")


class NavigationItem(Base):
    """Link inside a navigation menu; items may nest through parent_id"""
    __tablename__ = "navigation_items"

    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(Integer, ForeignKey("navigation_menus.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    url = Column(String(500))
    page_id = Column(Integer, ForeignKey("pages.id"))
    target = Column(String(20), default="_self")
    css_class = Column(String(100))
    parent_id = Column(Integer, ForeignKey("navigation_items.id"))
    sort_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    menu = relationship("NavigationMenu", back_populates="items")
    page = relationship("Page")


class SpecialOffer(Base):
    """Promotional package or discount of a property"""
    __tablename__ = "special_offers"
    __table_args__ = (UniqueConstraint("property_id", "slug", name="uq_offer_property_slug"),)

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    description = Column(Text)
    short_description = Column(String(300))
    type = Column(SQLEnum(OfferType), default=OfferType.PACKAGE, nullable=False)
    offer_price = Column(Numeric(12, 2))
    original_price = Column(Numeric(12, 2))
    currency = Column(String(3), default="PHP")
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=False)
    booking_deadline = Column(Date)
    min_nights = Column(Integer, default=1)
    promo_code = Column(String(50))
    inclusions = Column(JSON, default=list)
    exclusions = Column(JSON, default=list)
    terms = Column(Text)
    image = Column(String(255))
    status = Column(SQLEnum(OfferStatus), default=OfferStatus.ACTIVE, nullable=False)
    is_published = Column(Boolean, default=False)
    is_featured = Column(Boolean, default=False)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    hotel = relationship("Property")


class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"))
    guest_name = Column(String(100), nullable=False)
    guest_title = Column(String(100))
    guest_country = Column(String(100))
    content = Column(Text, nullable=False)
    rating = Column(Integer, default=5)
    source = Column(String(50))
    is_active = Column(Boolean, default=True)
    is_featured = Column(Boolean, default=False)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class FAQ(Base):
    __tablename__ = "faqs"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"))
    question = Column(String(500), nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(100))
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Feedback(Base):
    """Visitor feedback submitted from the public site"""
    __tablename__ = "feedbacks"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"))
    name = Column(String(100))
    email = Column(String(150))
    content = Column(String(1000), nullable=False)
    category = Column(SQLEnum(FeedbackCategory), default=FeedbackCategory.GENERAL_INQUIRY, nullable=False)
    sentiment = Column(SQLEnum(FeedbackSentiment), default=FeedbackSentiment.NEUTRAL, nullable=False)
    priority = Column(SQLEnum(FeedbackPriority), default=FeedbackPriority.MEDIUM, nullable=False)
    status = Column(SQLEnum(FeedbackStatus), default=FeedbackStatus.NEW, nullable=False)
    response = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class WebsiteConfiguration(Base):
    """Site-wide settings; a single row"""
    __tablename__ = "website_configuration"

    id = Column(Integer, primary_key=True, index=True)
    site_name = Column(String(100), nullable=False)
    company_name = Column(String(150), nullable=False)
    tagline = Column(String(200))
    description = Column(Text)

    primary_email = Column(String(150))
    primary_phone = Column(String(50))
    headquarters = Column(String(255))

    facebook_url = Column(String(255))
    instagram_url = Column(String(255))
    twitter_url = Column(String(255))
    linkedin_url = Column(String(255))
    youtube_url = Column(String(255))

    logo = Column(String(255))
    favicon = Column(String(255))
    primary_color = Column(String(7))
    secondary_color = Column(String(7))
    accent_color = Column(String(7))

    default_currency = Column(String(3), default="PHP")
    default_timezone = Column(String(50), default="Asia/Manila")
    date_format = Column(String(20), default="MM/dd/yyyy")
    time_format = Column(String(20), default="12h")

    maintenance_mode = Column(Boolean, default=False)
    debug_mode = Column(Boolean, default=False)

    email_notifications = Column(Boolean, default=True)
    booking_alerts = Column(Boolean, default=True)
    maintenance_alerts = Column(Boolean, default=True)

    two_factor_required = Column(Boolean, default=False)
    session_duration = Column(Integer, default=480)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
