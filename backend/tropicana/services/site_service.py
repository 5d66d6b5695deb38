"""
Website services
Navigation menus, special offers, testimonials, FAQs, feedback and the
site-wide configuration
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.cms import (
    NavigationMenu, NavigationItem, SpecialOffer, Testimonial, FAQ,
    Feedback, WebsiteConfiguration
)
from tropicana.models.hotel import Property
from tropicana.models.enums import OfferStatus, FeedbackStatus
from tropicana.models.events import EventType
from tropicana.models.cms_schemas import (
    NavigationMenuCreate, NavigationMenuUpdate, NavigationItemCreate, NavigationItemUpdate,
    SpecialOfferCreate, SpecialOfferUpdate, TestimonialCreate, TestimonialUpdate,
    FAQCreate, FAQUpdate, FeedbackCreate, FeedbackUpdate,
    WebsiteConfigurationCreate, WebsiteConfigurationUpdate
)
from tropicana.services.event_bus import publish_event
from tropicana.services.exceptions import NotFoundError, ConflictError, ValidationError

logger = logging.getLogger(__name__)


class NavigationService:
    """Navigation menu service"""

    def __init__(self, db: Session):
        self.db = db

    def get_menus(self) -> List[NavigationMenu]:
        return self.db.query(NavigationMenu).order_by(NavigationMenu.name).all()

    def require_menu(self, menu_id: int) -> NavigationMenu:
        menu = self.db.query(NavigationMenu).filter(NavigationMenu.id == menu_id).first()
        if not menu:
            raise NotFoundError("Navigation menu not found")
        return menu

    def _check_slug(self, slug: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(NavigationMenu).filter(NavigationMenu.slug == slug)
        if exclude_id:
            query = query.filter(NavigationMenu.id != exclude_id)
        if query.first():
            raise ConflictError(f"A menu with slug '{slug}' already exists")

    def create_menu(self, data: NavigationMenuCreate, created_by: Optional[int] = None) -> NavigationMenu:
        self._check_slug(data.slug)
        menu = NavigationMenu(**data.model_dump(), created_by=created_by)
        self.db.add(menu)
        self.db.commit()
        self.db.refresh(menu)
        return menu

    def update_menu(self, menu_id: int, data: NavigationMenuUpdate) -> NavigationMenu:
        menu = self.require_menu(menu_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("slug") and update_data["slug"] != menu.slug:
            self._check_slug(update_data["slug"], exclude_id=menu.id)
        for key, value in update_data.items():
            setattr(menu, key, value)
        self.db.commit()
        self.db.refresh(menu)
        return menu

    def delete_menu(self, menu_id: int) -> None:
        self.db.delete(self.require_menu(menu_id))
        self.db.commit()

    # ============== Items ==============

    def require_item(self, menu_id: int, item_id: int) -> NavigationItem:
        item = self.db.query(NavigationItem).filter(
            NavigationItem.id == item_id,
            NavigationItem.menu_id == menu_id,
        ).first()
        if not item:
            raise NotFoundError("Navigation item not found")
        return item

    def _check_parent(self, menu_id: int, parent_id: Optional[int], item_id: Optional[int] = None) -> None:
        if parent_id is None:
            return
        if parent_id == item_id:
            raise ValidationError("An item cannot be its own parent")
        self.require_item(menu_id, parent_id)

    def add_item(self, menu_id: int, data: NavigationItemCreate) -> NavigationItem:
        menu = self.require_menu(menu_id)
        self._check_parent(menu.id, data.parent_id)
        item = NavigationItem(**data.model_dump())
        menu.items.append(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, menu_id: int, item_id: int, data: NavigationItemUpdate) -> NavigationItem:
        item = self.require_item(menu_id, item_id)
        update_data = data.model_dump(exclude_unset=True)
        if "parent_id" in update_data:
            self._check_parent(menu_id, update_data["parent_id"], item.id)
        for key, value in update_data.items():
            setattr(item, key, value)
        if not item.url and not item.page_id:
            raise ValidationError("Either url or page_id is required")
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, menu_id: int, item_id: int) -> None:
        item = self.require_item(menu_id, item_id)
        self.db.query(NavigationItem).filter(NavigationItem.parent_id == item.id).update(
            {NavigationItem.parent_id: None}, synchronize_session=False
        )
        self.db.delete(item)
        self.db.commit()


class OfferService:
    """Special offer service"""

    def __init__(self, db: Session):
        self.db = db

    def get_offers(self, property_id: Optional[int] = None, status: Optional[OfferStatus] = None) -> List[SpecialOffer]:
        query = self.db.query(SpecialOffer)
        if property_id:
            query = query.filter(SpecialOffer.property_id == property_id)
        if status:
            query = query.filter(SpecialOffer.status == status)
        return query.order_by(SpecialOffer.sort_order, SpecialOffer.valid_from).all()

    def get_live_offers(self, property_id: Optional[int] = None, featured_only: bool = False,
                        today: Optional[date] = None) -> List[SpecialOffer]:
        """Published ACTIVE offers whose validity window covers today"""
        today = today or date.today()
        query = self.db.query(SpecialOffer).filter(
            SpecialOffer.status == OfferStatus.ACTIVE,
            SpecialOffer.is_published == True,
            SpecialOffer.valid_from <= today,
            SpecialOffer.valid_to >= today,
        )
        if property_id:
            query = query.filter(SpecialOffer.property_id == property_id)
        if featured_only:
            query = query.filter(SpecialOffer.is_featured == True)
        return query.order_by(SpecialOffer.sort_order, SpecialOffer.valid_to).all()

    def require_offer(self, offer_id: int) -> SpecialOffer:
        offer = self.db.query(SpecialOffer).filter(SpecialOffer.id == offer_id).first()
        if not offer:
            raise NotFoundError("Offer not found")
        return offer

    def _check_slug(self, property_id: int, slug: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(SpecialOffer).filter(
            SpecialOffer.property_id == property_id,
            SpecialOffer.slug == slug,
        )
        if exclude_id:
            query = query.filter(SpecialOffer.id != exclude_id)
        if query.first():
            raise ConflictError(f"An offer with slug '{slug}' already exists for this property")

    def create_offer(self, data: SpecialOfferCreate) -> SpecialOffer:
        if not self.db.query(Property).filter(Property.id == data.property_id).first():
            raise NotFoundError("Property not found")
        self._check_slug(data.property_id, data.slug)
        offer = SpecialOffer(**data.model_dump())
        self.db.add(offer)
        self.db.commit()
        self.db.refresh(offer)
        logger.info(f"Offer '{offer.slug}' created for property {offer.property_id}")
        return offer

    def update_offer(self, offer_id: int, data: SpecialOfferUpdate) -> SpecialOffer:
        offer = self.require_offer(offer_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("slug") and update_data["slug"] != offer.slug:
            self._check_slug(offer.property_id, update_data["slug"], exclude_id=offer.id)
        for key, value in update_data.items():
            setattr(offer, key, value)
        if offer.valid_to < offer.valid_from:
            raise ValidationError("valid_to must not be before valid_from")
        self.db.commit()
        self.db.refresh(offer)
        return offer

    def delete_offer(self, offer_id: int) -> None:
        self.db.delete(self.require_offer(offer_id))
        self.db.commit()


class TestimonialService:
    """Testimonial service"""

    __test__ = False

    def __init__(self, db: Session):
        self.db = db

    def get_testimonials(self, active_only: bool = False, featured_only: bool = False) -> List[Testimonial]:
        query = self.db.query(Testimonial)
        if active_only:
            query = query.filter(Testimonial.is_active == True)
        if featured_only:
            query = query.filter(Testimonial.is_featured == True)
        return query.order_by(Testimonial.sort_order, Testimonial.created_at.desc()).all()

    def require_testimonial(self, testimonial_id: int) -> Testimonial:
        testimonial = self.db.query(Testimonial).filter(Testimonial.id == testimonial_id).first()
        if not testimonial:
            raise NotFoundError("Testimonial not found")
        return testimonial

    def create_testimonial(self, data: TestimonialCreate) -> Testimonial:
        testimonial = Testimonial(**data.model_dump())
        self.db.add(testimonial)
        self.db.commit()
        self.db.refresh(testimonial)
        return testimonial

    def update_testimonial(self, testimonial_id: int, data: TestimonialUpdate) -> Testimonial:
        testimonial = self.require_testimonial(testimonial_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(testimonial, key, value)
        self.db.commit()
        self.db.refresh(testimonial)
        return testimonial

    def delete_testimonial(self, testimonial_id: int) -> None:
        self.db.delete(self.require_testimonial(testimonial_id))
        self.db.commit()


class FAQService:
    """FAQ service"""

    def __init__(self, db: Session):
        self.db = db

    def get_faqs(self, active_only: bool = False, category: Optional[str] = None) -> List[FAQ]:
        query = self.db.query(FAQ)
        if active_only:
            query = query.filter(FAQ.is_active == True)
        if category:
            query = query.filter(FAQ.category == category)
        return query.order_by(FAQ.sort_order, FAQ.id).all()

    def require_faq(self, faq_id: int) -> FAQ:
        faq = self.db.query(FAQ).filter(FAQ.id == faq_id).first()
        if not faq:
            raise NotFoundError("FAQ not found")
        return faq

    def create_faq(self, data: FAQCreate) -> FAQ:
        faq = FAQ(**data.model_dump())
        self.db.add(faq)
        self.db.commit()
        self.db.refresh(faq)
        return faq

    def update_faq(self, faq_id: int, data: FAQUpdate) -> FAQ:
        faq = self.require_faq(faq_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(faq, key, value)
        self.db.commit()
        self.db.refresh(faq)
        return faq

    def delete_faq(self, faq_id: int) -> None:
        self.db.delete(self.require_faq(faq_id))
        self.db.commit()


class FeedbackService:
    """Feedback service"""

    def __init__(self, db: Session):
        self.db = db

    def get_feedbacks(self, status: Optional[FeedbackStatus] = None) -> List[Feedback]:
        query = self.db.query(Feedback)
        if status:
            query = query.filter(Feedback.status == status)
        return query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()

    def require_feedback(self, feedback_id: int) -> Feedback:
        feedback = self.db.query(Feedback).filter(Feedback.id == feedback_id).first()
        if not feedback:
            raise NotFoundError("Feedback not found")
        return feedback

    def submit(self, data: FeedbackCreate) -> Feedback:
        feedback = Feedback(**data.model_dump(), status=FeedbackStatus.NEW)
        self.db.add(feedback)
        self.db.commit()
        self.db.refresh(feedback)

        publish_event(EventType.FEEDBACK_RECEIVED, {
            "feedback_id": feedback.id,
            "category": feedback.category.value,
            "priority": feedback.priority.value,
            "excerpt": feedback.content[:80],
        }, source="feedback_service")
        return feedback

    def update_feedback(self, feedback_id: int, data: FeedbackUpdate) -> Feedback:
        feedback = self.require_feedback(feedback_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(feedback, key, value)
        self.db.commit()
        self.db.refresh(feedback)
        return feedback

    def delete_feedback(self, feedback_id: int) -> None:
        self.db.delete(self.require_feedback(feedback_id))
        self.db.commit()


class WebsiteConfigService:
    """Singleton website configuration"""

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> Optional[WebsiteConfiguration]:
        return self.db.query(WebsiteConfiguration).order_by(WebsiteConfiguration.id).first()

    def require(self) -> WebsiteConfiguration:
        config = self.get()
        if not config:
            raise NotFoundError("Website configuration not found")
        return config

    def create(self, data: WebsiteConfigurationCreate) -> WebsiteConfiguration:
        if self.get():
            raise ConflictError("Website configuration already exists")
        config = WebsiteConfiguration(**data.model_dump())
        self.db.add(config)
        self.db.commit()
        self.db.refresh(config)
        logger.info("Website configuration created")
        return config

    def update(self, data: WebsiteConfigurationUpdate) -> WebsiteConfiguration:
        config = self.require()
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(config, key, value)
        self.db.commit()
        self.db.refresh(config)
        return config
