"""
Enumerations shared by the ORM models and the API schemas
"""
from enum import Enum


# ============== Properties & rooms ==============

class PropertyType(str, Enum):
    """Kind of business unit"""
    HOTEL = "HOTEL"
    RESORT = "RESORT"
    VILLA_COMPLEX = "VILLA_COMPLEX"
    APARTMENT_HOTEL = "APARTMENT_HOTEL"
    BOUTIQUE_HOTEL = "BOUTIQUE_HOTEL"


class RoomCategory(str, Enum):
    """Room type classification"""
    STANDARD = "STANDARD"
    SUPERIOR = "SUPERIOR"
    DELUXE = "DELUXE"
    SUITE = "SUITE"
    FAMILY = "FAMILY"
    VILLA = "VILLA"
    PENTHOUSE = "PENTHOUSE"
    ACCESSIBLE = "ACCESSIBLE"


class RoomStatus(str, Enum):
    """Operational room status"""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_ORDER = "OUT_OF_ORDER"
    BLOCKED = "BLOCKED"


class HousekeepingStatus(str, Enum):
    """Housekeeping status"""
    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    INSPECTED = "INSPECTED"
    OUT_OF_ORDER = "OUT_OF_ORDER"


# ============== Reservations & payments ==============

class ReservationStatus(str, Enum):
    """Reservation lifecycle"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class ReservationSource(str, Enum):
    """Booking channel"""
    WEBSITE = "WEBSITE"
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    WALK_IN = "WALK_IN"
    OTA = "OTA"
    AGENT = "AGENT"
    ADMIN = "ADMIN"


class ReservationPaymentStatus(str, Enum):
    """Payment state of a reservation as a whole"""
    PENDING = "PENDING"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class PaymentStatus(str, Enum):
    """State of a single payment record"""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class PaymentMethod(str, Enum):
    """Payment method"""
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    GCASH = "GCASH"
    PAYMAYA = "PAYMAYA"
    PAYMONGO = "PAYMONGO"


class WebhookEventStatus(str, Enum):
    """Processing state of a stored webhook event"""
    RECEIVED = "received"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


# ============== Operations ==============

class ServiceCategory(str, Enum):
    """Department a task or service request belongs to"""
    HOUSEKEEPING = "HOUSEKEEPING"
    MAINTENANCE = "MAINTENANCE"
    ROOM_SERVICE = "ROOM_SERVICE"
    CONCIERGE = "CONCIERGE"
    FRONT_DESK = "FRONT_DESK"
    OTHER = "OTHER"


class TaskPriority(str, Enum):
    """Task priority"""
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ServiceStatus(str, Enum):
    """Task and service request status"""
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# ============== Content ==============

class PublishStatus(str, Enum):
    """Publication state of pages and posts"""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    SCHEDULED = "SCHEDULED"
    ARCHIVED = "ARCHIVED"


class PageTemplate(str, Enum):
    DEFAULT = "DEFAULT"
    FULL_WIDTH = "FULL_WIDTH"
    LANDING = "LANDING"
    CONTACT = "CONTACT"


class ContentType(str, Enum):
    PAGE = "PAGE"
    LANDING_PAGE = "LANDING_PAGE"
    LEGAL = "LEGAL"


class ContentScope(str, Enum):
    GLOBAL = "GLOBAL"
    PROPERTY = "PROPERTY"


class MediaCategory(str, Enum):
    GENERAL = "GENERAL"
    PROPERTY = "PROPERTY"
    ROOM = "ROOM"
    AMENITY = "AMENITY"
    BLOG = "BLOG"
    OFFER = "OFFER"


class OfferType(str, Enum):
    """Special offer type"""
    PACKAGE = "PACKAGE"
    DISCOUNT = "DISCOUNT"
    EARLY_BIRD = "EARLY_BIRD"
    LAST_MINUTE = "LAST_MINUTE"
    SEASONAL = "SEASONAL"
    PROMO_CODE = "PROMO_CODE"


class OfferStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


class FeedbackCategory(str, Enum):
    GENERAL_INQUIRY = "GENERAL_INQUIRY"
    COMPLAINT = "COMPLAINT"
    SUGGESTION = "SUGGESTION"
    COMPLIMENT = "COMPLIMENT"
    BOOKING_ISSUE = "BOOKING_ISSUE"


class FeedbackSentiment(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class FeedbackPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class FeedbackStatus(str, Enum):
    NEW = "NEW"
    IN_REVIEW = "IN_REVIEW"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


# ============== Users ==============

class UserStatus(str, Enum):
    """Staff account status"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
