"""
CMS routes
Pages, blog posts and the media library
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from tropicana.database import get_db
from tropicana.models.users import User
from tropicana.models.enums import PublishStatus, MediaCategory
from tropicana.models.cms_schemas import (
    PageCreate, PageUpdate, PageResponse,
    BlogPostCreate, BlogPostUpdate, BlogPostResponse,
    MediaUpdate, MediaResponse
)
from tropicana.services.content_service import PageService, BlogService
from tropicana.services.media_service import MediaService
from tropicana.security.auth import require_staff, require_manager

router = APIRouter(tags=["Content"])


# ============== Pages ==============

@router.get("/pages", response_model=List[PageResponse])
def list_pages(
    page_status: Optional[PublishStatus] = Query(None, alias="status"),
    locale: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PageService(db).get_pages(page_status, locale)


@router.post("/pages", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(
    data: PageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Create a page; PUBLISHED pages get published_at"""
    return PageService(db).create_page(data, author_id=current_user.id)


@router.get("/pages/{page_id}", response_model=PageResponse)
def get_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PageService(db).require_page(page_id)


@router.patch("/pages/{page_id}", response_model=PageResponse)
def update_page(
    page_id: int,
    data: PageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return PageService(db).update_page(page_id, data, editor_id=current_user.id)


@router.delete("/pages/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    PageService(db).delete_page(page_id)


# ============== Blog ==============

@router.get("/blog", response_model=List[BlogPostResponse])
def list_posts(
    post_status: Optional[PublishStatus] = Query(None, alias="status"),
    tag: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return BlogService(db).get_posts(post_status, tag, limit)


@router.post("/blog", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    data: BlogPostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return BlogService(db).create_post(data, author_id=current_user.id)


@router.get("/blog/{post_id}", response_model=BlogPostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return BlogService(db).require_post(post_id)


@router.patch("/blog/{post_id}", response_model=BlogPostResponse)
def update_post(
    post_id: int,
    data: BlogPostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return BlogService(db).update_post(post_id, data)


@router.delete("/blog/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    BlogService(db).delete_post(post_id)


# ============== Media ==============

@router.get("/media", response_model=List[MediaResponse])
def list_media(
    category: Optional[MediaCategory] = None,
    property_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return MediaService(db).get_media(category, property_id)


@router.post("/media", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    alt_text: Optional[str] = Form(None),
    category: Optional[MediaCategory] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    """Store an uploaded file under the media root"""
    content = await file.read()
    return MediaService(db).upload(
        file.filename,
        content,
        mime_type=file.content_type,
        title=title,
        alt_text=alt_text,
        category=category,
        uploaded_by=current_user.id,
    )


@router.get("/media/{media_id}", response_model=MediaResponse)
def get_media(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return MediaService(db).require_media(media_id)


@router.patch("/media/{media_id}", response_model=MediaResponse)
def update_media(
    media_id: int,
    data: MediaUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff)
):
    return MediaService(db).update_media(media_id, data)


@router.delete("/media/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_media(
    media_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """Delete a media record and its file"""
    MediaService(db).delete_media(media_id)
