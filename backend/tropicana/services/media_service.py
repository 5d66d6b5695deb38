"""
Media service
Stores uploads under MEDIA_ROOT and keeps their metadata
"""
import logging
import re
import time
from pathlib import Path
from typing import List, Optional
from sqlalchemy.orm import Session
from tropicana.config import settings
from tropicana.models.cms import Media
from tropicana.models.enums import MediaCategory
from tropicana.models.cms_schemas import MediaUpdate
from tropicana.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def storage_name(original_name: str) -> str:
    """``<epoch ms>-<name>`` with whitespace replaced by underscores"""
    base = Path(original_name).name
    return f"{int(time.time() * 1000)}-{_WHITESPACE_RE.sub('_', base)}"


class MediaService:
    """Media service"""

    def __init__(self, db: Session, media_root: Optional[str] = None):
        self.db = db
        self.root = Path(media_root or settings.MEDIA_ROOT)

    def get_media(self, category: Optional[MediaCategory] = None,
                  property_id: Optional[int] = None) -> List[Media]:
        query = self.db.query(Media)
        if category:
            query = query.filter(Media.category == category)
        if property_id:
            query = query.filter(Media.property_id == property_id)
        return query.order_by(Media.created_at.desc(), Media.id.desc()).all()

    def require_media(self, media_id: int) -> Media:
        media = self.db.query(Media).filter(Media.id == media_id).first()
        if not media:
            raise NotFoundError("Media not found")
        return media

    def upload(self, original_name: str, content: bytes, mime_type: Optional[str] = None,
               title: Optional[str] = None, alt_text: Optional[str] = None,
               category: Optional[MediaCategory] = None, uploaded_by: Optional[int] = None) -> Media:
        if not original_name:
            raise ValidationError("No file uploaded")

        filename = storage_name(original_name)
        path = self.root / filename
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

        media = Media(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size=len(content),
            url=f"{settings.MEDIA_URL_PREFIX.rstrip('/')}/{filename}",
            title=title,
            alt_text=alt_text,
            category=category or MediaCategory.GENERAL,
            tags=[],
            uploaded_by=uploaded_by,
        )
        try:
            self.db.add(media)
            self.db.commit()
        except Exception:
            self.db.rollback()
            path.unlink(missing_ok=True)
            logger.error(f"Discarded upload {filename}: its record could not be saved", exc_info=True)
            raise
        self.db.refresh(media)
        logger.info(f"Stored upload {filename} ({media.size} bytes)")
        return media

    def update_media(self, media_id: int, data: MediaUpdate) -> Media:
        media = self.require_media(media_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(media, key, value)
        self.db.commit()
        self.db.refresh(media)
        return media

    def delete_media(self, media_id: int) -> None:
        media = self.require_media(media_id)
        path = self.root / media.filename
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Media file {path} was already missing")
        self.db.delete(media)
        self.db.commit()
