"""
Content service
Pages and blog posts with their publishing rules
"""
import logging
import math
import re
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.models.cms import Page, BlogPost
from tropicana.models.enums import PublishStatus
from tropicana.models.cms_schemas import PageCreate, PageUpdate, BlogPostCreate, BlogPostUpdate
from tropicana.services.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
_TAG_RE = re.compile(r"<[^>]+>")


def estimate_reading_time(content: str) -> int:
    """Minutes to read ``content`` at 200 words per minute, at least 1"""
    words = len(_TAG_RE.sub(" ", content or "").split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def apply_publish_status(entity, status: Optional[PublishStatus]) -> None:
    """PUBLISHED stamps published_at with now, DRAFT clears it"""
    if status == PublishStatus.PUBLISHED:
        entity.published_at = datetime.utcnow()
    elif status == PublishStatus.DRAFT:
        entity.published_at = None


class PageService:
    """Page service"""

    def __init__(self, db: Session):
        self.db = db

    def get_pages(self, status: Optional[PublishStatus] = None, locale: Optional[str] = None) -> List[Page]:
        query = self.db.query(Page)
        if status:
            query = query.filter(Page.status == status)
        if locale:
            query = query.filter(Page.locale == locale)
        return query.order_by(Page.updated_at.desc(), Page.id.desc()).all()

    def require_page(self, page_id: int) -> Page:
        page = self.db.query(Page).filter(Page.id == page_id).first()
        if not page:
            raise NotFoundError("Page not found")
        return page

    def get_published_by_slug(self, slug: str) -> Page:
        page = self.db.query(Page).filter(
            Page.slug == slug,
            Page.status == PublishStatus.PUBLISHED,
            Page.is_public == True,
        ).first()
        if not page:
            raise NotFoundError("Page not found")
        return page

    def get_home_page(self) -> Optional[Page]:
        return self.db.query(Page).filter(
            Page.is_home_page == True,
            Page.status == PublishStatus.PUBLISHED,
        ).first()

    def _check_slug(self, slug: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Page).filter(Page.slug == slug)
        if exclude_id:
            query = query.filter(Page.id != exclude_id)
        if query.first():
            raise ConflictError(f"A page with slug '{slug}' already exists")

    def _clear_home_page(self, keep_id: Optional[int] = None) -> None:
        query = self.db.query(Page).filter(Page.is_home_page == True)
        if keep_id:
            query = query.filter(Page.id != keep_id)
        query.update({Page.is_home_page: False}, synchronize_session=False)

    def create_page(self, data: PageCreate, author_id: Optional[int] = None) -> Page:
        self._check_slug(data.slug)
        page = Page(**data.model_dump(), author_id=author_id, editor_id=author_id)
        if page.status == PublishStatus.PUBLISHED:
            page.published_at = datetime.utcnow()
        if page.is_home_page:
            self._clear_home_page()
        self.db.add(page)
        self.db.commit()
        self.db.refresh(page)
        logger.info(f"Page '{page.slug}' created ({page.status.value})")
        return page

    def update_page(self, page_id: int, data: PageUpdate, editor_id: Optional[int] = None) -> Page:
        page = self.require_page(page_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("slug") and update_data["slug"] != page.slug:
            self._check_slug(update_data["slug"], exclude_id=page.id)
        if update_data.get("is_home_page"):
            self._clear_home_page(keep_id=page.id)

        for key, value in update_data.items():
            setattr(page, key, value)
        if "status" in update_data:
            apply_publish_status(page, update_data["status"])
        page.editor_id = editor_id or page.editor_id

        self.db.commit()
        self.db.refresh(page)
        return page

    def delete_page(self, page_id: int) -> None:
        page = self.require_page(page_id)
        self.db.query(Page).filter(Page.parent_id == page.id).update(
            {Page.parent_id: None}, synchronize_session=False
        )
        self.db.delete(page)
        self.db.commit()


class BlogService:
    """Blog post service"""

    def __init__(self, db: Session):
        self.db = db

    def get_posts(self, status: Optional[PublishStatus] = None, tag: Optional[str] = None,
                  limit: Optional[int] = None) -> List[BlogPost]:
        query = self.db.query(BlogPost)
        if status:
            query = query.filter(BlogPost.status == status)
        query = query.order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc())
        posts = query.all()
        if tag:
            posts = [p for p in posts if tag in (p.tags or [])]
        return posts[:limit] if limit else posts

    def require_post(self, post_id: int) -> BlogPost:
        post = self.db.query(BlogPost).filter(BlogPost.id == post_id).first()
        if not post:
            raise NotFoundError("Blog post not found")
        return post

    def view_published(self, slug: str) -> BlogPost:
        """Published post by slug; counts the view"""
        post = self.db.query(BlogPost).filter(
            BlogPost.slug == slug,
            BlogPost.status == PublishStatus.PUBLISHED,
        ).first()
        if not post:
            raise NotFoundError("Blog post not found")
        post.view_count = (post.view_count or 0) + 1
        self.db.commit()
        self.db.refresh(post)
        return post

    def _check_slug(self, slug: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(BlogPost).filter(BlogPost.slug == slug)
        if exclude_id:
            query = query.filter(BlogPost.id != exclude_id)
        if query.first():
            raise ConflictError(f"A blog post with slug '{slug}' already exists")

    def create_post(self, data: BlogPostCreate, author_id: Optional[int] = None) -> BlogPost:
        self._check_slug(data.slug)
        post = BlogPost(**data.model_dump(), author_id=author_id, view_count=0)
        if not post.reading_time:
            post.reading_time = estimate_reading_time(post.content)
        if post.status == PublishStatus.PUBLISHED:
            post.published_at = datetime.utcnow()
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"Blog post '{post.slug}' created ({post.status.value})")
        return post

    def update_post(self, post_id: int, data: BlogPostUpdate) -> BlogPost:
        post = self.require_post(post_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("slug") and update_data["slug"] != post.slug:
            self._check_slug(update_data["slug"], exclude_id=post.id)

        for key, value in update_data.items():
            setattr(post, key, value)
        if "content" in update_data and "reading_time" not in update_data:
            post.reading_time = estimate_reading_time(post.content)
        if "status" in update_data:
            apply_publish_status(post, update_data["status"])

        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int) -> None:
        post = self.require_post(post_id)
        self.db.delete(post)
        self.db.commit()
