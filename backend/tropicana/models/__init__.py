# ORM models
from tropicana.models.hotel import Property, RoomType, Amenity, RoomTypeAmenity, Room, RoomRate
from tropicana.models.booking import (
    Guest, Reservation, ReservationRoom, Payment, PaymentAttempt, WebhookEvent
)
from tropicana.models.operations import Stay, StayCharge, Task, ServiceRequest
from tropicana.models.cms import (
    Media, Page, BlogPost, NavigationMenu, NavigationItem, SpecialOffer,
    Testimonial, FAQ, Feedback, WebsiteConfiguration
)
from tropicana.models.users import User, Role, UserRoleAssignment

__all__ = [
    'Property', 'RoomType', 'Amenity', 'RoomTypeAmenity', 'Room', 'RoomRate',
    'Guest', 'Reservation', 'ReservationRoom', 'Payment', 'PaymentAttempt', 'WebhookEvent',
    'Stay', 'StayCharge', 'Task', 'ServiceRequest',
    'Media', 'Page', 'BlogPost', 'NavigationMenu', 'NavigationItem', 'SpecialOffer',
    'Testimonial', 'FAQ', 'Feedback', 'WebsiteConfiguration',
    'User', 'Role', 'UserRoleAssignment',
]
