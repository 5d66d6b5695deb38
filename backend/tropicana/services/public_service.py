"""
Public site service
Read-only views of published inventory and content for the guest website
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.hotel import Property, RoomType
from tropicana.models.enums import PropertyType
from tropicana.services.exceptions import NotFoundError
from tropicana.services.price_service import money
from tropicana.services.site_service import (
    OfferService, TestimonialService, FAQService, WebsiteConfigService
)
from tropicana.services.content_service import PageService


class PublicSiteService:
    """Public site service"""

    def __init__(self, db: Session):
        self.db = db

    def list_properties(self, city: Optional[str] = None,
                        property_type: Optional[PropertyType] = None,
                        featured: Optional[bool] = None) -> List[Property]:
        query = self.db.query(Property).filter(
            Property.is_published == True,
            Property.is_active == True,
        )
        if city:
            query = query.filter(Property.city.ilike(city))
        if property_type:
            query = query.filter(Property.property_type == property_type)
        if featured is not None:
            query = query.filter(Property.is_featured == featured)
        return query.order_by(Property.sort_order, Property.name).all()

    def require_property(self, slug: str) -> Property:
        prop = self.db.query(Property).filter(
            Property.slug == slug,
            Property.is_published == True,
            Property.is_active == True,
        ).first()
        if not prop:
            raise NotFoundError("Property not found")
        return prop

    def starting_rate(self, room_type: RoomType, today: Optional[date] = None) -> Decimal:
        """Lowest nightly price currently on offer for the room type"""
        today = today or date.today()
        prices = [Decimal(room_type.base_rate)]
        for rate in room_type.rates:
            if not rate.is_active:
                continue
            if rate.valid_to < today:
                continue
            prices.append(Decimal(rate.base_rate))
        return money(min(prices))

    def room_type_view(self, room_type: RoomType) -> dict:
        return {
            "room_type": room_type,
            "amenities": [a for a in room_type.amenities if a.is_active],
            "starting_rate": self.starting_rate(room_type),
        }

    def get_room_types(self, slug: str) -> List[dict]:
        prop = self.require_property(slug)
        return [self.room_type_view(rt) for rt in prop.room_types if rt.is_active]

    def get_room_type(self, slug: str, room_type_id: int) -> dict:
        prop = self.require_property(slug)
        room_type = next(
            (rt for rt in prop.room_types if rt.id == room_type_id and rt.is_active),
            None,
        )
        if not room_type:
            raise NotFoundError("Room type not found")
        view = self.room_type_view(room_type)
        view["policies"] = {
            "check_in_time": prop.check_in_time,
            "check_out_time": prop.check_out_time,
            "cancellation_hours": prop.cancellation_hours,
        }
        return view

    def get_property_detail(self, slug: str) -> dict:
        prop = self.require_property(slug)
        return {
            "property": prop,
            "room_types": [self.room_type_view(rt) for rt in prop.room_types if rt.is_active],
            "amenity_names": [a.name for a in sorted(prop.amenities, key=lambda a: a.sort_order or 0)
                              if a.is_active],
            "offers": OfferService(self.db).get_live_offers(property_id=prop.id),
        }

    def get_home(self, today: Optional[date] = None) -> dict:
        """Everything the landing page renders"""
        return {
            "config": WebsiteConfigService(self.db).get(),
            "home_page": PageService(self.db).get_home_page(),
            "featured_properties": self.list_properties(featured=True),
            "featured_offers": OfferService(self.db).get_live_offers(featured_only=True, today=today),
            "testimonials": TestimonialService(self.db).get_testimonials(active_only=True, featured_only=True),
            "faqs": FAQService(self.db).get_faqs(active_only=True),
        }
