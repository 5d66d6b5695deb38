"""
Website routes
Navigation, offers, testimonials, FAQs, feedback and site settings
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import OfferStatus, FeedbackStatus
from tropicana.models.cms_schemas import (
    NavigationMenuCreate, NavigationMenuUpdate, NavigationMenuResponse,
    NavigationItemCreate, NavigationItemUpdate, NavigationItemResponse,
    SpecialOfferCreate, SpecialOfferUpdate, SpecialOfferResponse,
    TestimonialCreate, TestimonialUpdate, TestimonialResponse,
    FAQCreate, FAQUpdate, FAQResponse,
    FeedbackCreate, FeedbackUpdate, FeedbackResponse,
    WebsiteConfigurationCreate, WebsiteConfigurationUpdate, WebsiteConfigurationResponse
)
from tropicana.services.site_service import (
    NavigationService, OfferService, TestimonialService, FAQService,
    FeedbackService, WebsiteConfigService
)
from tropicana.security.auth import require_admin, require_manager, require_staff

router = APIRouter(tags=["Website"])


# ============== Navigation ==============

@router.get("/navigations", response_model=List[NavigationMenuResponse])
def list_menus(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return NavigationService(db).get_menus()


@router.post("/navigations", response_model=NavigationMenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    data: NavigationMenuCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return NavigationService(db).create_menu(data, created_by=current_user.id)


@router.get("/navigations/{menu_id}", response_model=NavigationMenuResponse)
def get_menu(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Menu with its items in sort order"""
    return NavigationService(db).require_menu(menu_id)


@router.patch("/navigations/{menu_id}", response_model=NavigationMenuResponse)
def update_menu(
    menu_id: int,
    data: NavigationMenuUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return NavigationService(db).update_menu(menu_id, data)


@router.delete("/navigations/{menu_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    NavigationService(db).delete_menu(menu_id)


@router.get("/navigations/{menu_id}/items", response_model=List[NavigationItemResponse])
def list_menu_items(
    menu_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return NavigationService(db).require_menu(menu_id).items


@router.post("/navigations/{menu_id}/items", response_model=NavigationItemResponse,
             status_code=status.HTTP_201_CREATED)
def add_menu_item(
    menu_id: int,
    data: NavigationItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return NavigationService(db).add_item(menu_id, data)


@router.get("/navigations/{menu_id}/items/{item_id}", response_model=NavigationItemResponse)
def get_menu_item(
    menu_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return NavigationService(db).require_item(menu_id, item_id)


@router.patch("/navigations/{menu_id}/items/{item_id}", response_model=NavigationItemResponse)
def update_menu_item(
    menu_id: int,
    item_id: int,
    data: NavigationItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return NavigationService(db).update_item(menu_id, item_id, data)


@router.delete("/navigations/{menu_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    menu_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    NavigationService(db).delete_item(menu_id, item_id)


# ============== Special offers ==============

@router.get("/offers", response_model=List[SpecialOfferResponse])
def list_offers(
    property_id: Optional[int] = None,
    offer_status: Optional[OfferStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return OfferService(db).get_offers(property_id, offer_status)


@router.post("/offers", response_model=SpecialOfferResponse, status_code=status.HTTP_201_CREATED)
def create_offer(
    data: SpecialOfferCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return OfferService(db).create_offer(data)


@router.get("/offers/{offer_id}", response_model=SpecialOfferResponse)
def get_offer(
    offer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return OfferService(db).require_offer(offer_id)


@router.patch("/offers/{offer_id}", response_model=SpecialOfferResponse)
def update_offer(
    offer_id: int,
    data: SpecialOfferUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return OfferService(db).update_offer(offer_id, data)


@router.delete("/offers/{offer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_offer(
    offer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    OfferService(db).delete_offer(offer_id)


# ============== Testimonials ==============

@router.get("/testimonials", response_model=List[TestimonialResponse])
def list_testimonials(
    active_only: bool = False,
    featured_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return TestimonialService(db).get_testimonials(active_only, featured_only)


@router.post("/testimonials", response_model=TestimonialResponse, status_code=status.HTTP_201_CREATED)
def create_testimonial(
    data: TestimonialCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return TestimonialService(db).create_testimonial(data)


@router.get("/testimonials/{testimonial_id}", response_model=TestimonialResponse)
def get_testimonial(
    testimonial_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return TestimonialService(db).require_testimonial(testimonial_id)


@router.patch("/testimonials/{testimonial_id}", response_model=TestimonialResponse)
def update_testimonial(
    testimonial_id: int,
    data: TestimonialUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return TestimonialService(db).update_testimonial(testimonial_id, data)


@router.delete("/testimonials/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_testimonial(
    testimonial_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    TestimonialService(db).delete_testimonial(testimonial_id)


# ============== FAQs ==============

@router.get("/faqs", response_model=List[FAQResponse])
def list_faqs(
    active_only: bool = False,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return FAQService(db).get_faqs(active_only, category)


@router.post("/faqs", response_model=FAQResponse, status_code=status.HTTP_201_CREATED)
def create_faq(
    data: FAQCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return FAQService(db).create_faq(data)


@router.get("/faqs/{faq_id}", response_model=FAQResponse)
def get_faq(
    faq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return FAQService(db).require_faq(faq_id)


@router.patch("/faqs/{faq_id}", response_model=FAQResponse)
def update_faq(
    faq_id: int,
    data: FAQUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    return FAQService(db).update_faq(faq_id, data)


@router.delete("/faqs/{faq_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_faq(
    faq_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    FAQService(db).delete_faq(faq_id)


# ============== Feedback ==============

@router.post("/feedbacks", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(data: FeedbackCreate, db: Session = Depends(get_db)):
    """Public feedback form"""
    return FeedbackService(db).submit(data)


@router.get("/feedbacks", response_model=List[FeedbackResponse])
def list_feedbacks(
    feedback_status: Optional[FeedbackStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return FeedbackService(db).get_feedbacks(feedback_status)


@router.get("/feedbacks/{feedback_id}", response_model=FeedbackResponse)
def get_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return FeedbackService(db).require_feedback(feedback_id)


@router.patch("/feedbacks/{feedback_id}", response_model=FeedbackResponse)
def update_feedback(
    feedback_id: int,
    data: FeedbackUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return FeedbackService(db).update_feedback(feedback_id, data)


@router.delete("/feedbacks/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    FeedbackService(db).delete_feedback(feedback_id)


# ============== Settings ==============

@router.get("/settings", response_model=WebsiteConfigurationResponse)
def get_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return WebsiteConfigService(db).require()


@router.post("/settings", response_model=WebsiteConfigurationResponse, status_code=status.HTTP_201_CREATED)
def create_settings(
    data: WebsiteConfigurationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create the site configuration; only one may exist"""
    return WebsiteConfigService(db).create(data)


@router.patch("/settings", response_model=WebsiteConfigurationResponse)
def update_settings(
    data: WebsiteConfigurationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return WebsiteConfigService(db).update(data)
