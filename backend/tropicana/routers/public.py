"""
Public site API
Unauthenticated, read-only endpoints for the guest website
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.enums import PropertyType, PublishStatus
from tropicana.models.schemas import PropertyResponse, AmenityResponse, RoomTypeResponse
from tropicana.models.cms_schemas import (
    PublicRoomType, PublicRoomTypeDetail, PublicPropertyDetail, PublicHome,
    PageResponse, BlogPostResponse, SpecialOfferResponse
)
from tropicana.services.content_service import PageService, BlogService
from tropicana.services.public_service import PublicSiteService

router = APIRouter(prefix="/public", tags=["Public site"])


def public_room_type(view: dict) -> PublicRoomType:
    return PublicRoomType(
        **RoomTypeResponse.model_validate(view["room_type"]).model_dump(),
        amenities=[AmenityResponse.model_validate(a) for a in view["amenities"]],
        starting_rate=view["starting_rate"],
    )


@router.get("/properties", response_model=List[PropertyResponse])
def list_properties(
    city: Optional[str] = None,
    property_type: Optional[PropertyType] = None,
    featured: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    """Published, active properties"""
    return PublicSiteService(db).list_properties(city, property_type, featured)


@router.get("/properties/{slug}", response_model=PublicPropertyDetail)
def get_property(slug: str, db: Session = Depends(get_db)):
    detail = PublicSiteService(db).get_property_detail(slug)
    return PublicPropertyDetail(
        **PropertyResponse.model_validate(detail["property"]).model_dump(),
        room_types=[public_room_type(v) for v in detail["room_types"]],
        amenity_names=detail["amenity_names"],
        offers=[SpecialOfferResponse.model_validate(o) for o in detail["offers"]],
    )


@router.get("/properties/{slug}/rooms", response_model=List[PublicRoomType])
def list_room_types(slug: str, db: Session = Depends(get_db)):
    """Active room types with their starting rate"""
    return [public_room_type(v) for v in PublicSiteService(db).get_room_types(slug)]


@router.get("/properties/{slug}/rooms/{room_type_id}", response_model=PublicRoomTypeDetail)
def get_room_type(slug: str, room_type_id: int, db: Session = Depends(get_db)):
    view = PublicSiteService(db).get_room_type(slug, room_type_id)
    return PublicRoomTypeDetail(
        **public_room_type(view).model_dump(),
        policies=view["policies"],
    )


@router.get("/home", response_model=PublicHome)
def get_home(db: Session = Depends(get_db)):
    """Landing page content"""
    return PublicSiteService(db).get_home()


@router.get("/pages/{slug}", response_model=PageResponse)
def get_page(slug: str, db: Session = Depends(get_db)):
    return PageService(db).get_published_by_slug(slug)


@router.get("/blog", response_model=List[BlogPostResponse])
def list_blog_posts(
    tag: Optional[str] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    return BlogService(db).get_posts(status=PublishStatus.PUBLISHED, tag=tag, limit=limit)


@router.get("/blog/{slug}", response_model=BlogPostResponse)
def get_blog_post(slug: str, db: Session = Depends(get_db)):
    """Published post; counts the view"""
    return BlogService(db).view_published(slug)
