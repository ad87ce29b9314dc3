"""Tag store service - tagged images and the tag list."""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from sqlalchemy import select

from database.db import Database, db as default_db
from database.models import PicarImage, PicarTag

logger = logging.getLogger(__name__)


class TagStoreService:
    """
    Gallery storage service.

    Appends and queries rows in picar_images and picar_tags. Each call runs in
    its own session; nothing spans calls.
    """

    def __init__(self, database: Optional[Database] = None):
        self.db = database or default_db

    async def image_urls(self, tag: Optional[str] = None) -> List[str]:
        """
        Image references, optionally restricted to a tag.

        Args:
            tag: Tag to filter on; None lists images of every tag

        Returns:
            img_url values in insertion order
        """
        stmt = select(PicarImage.img_url).order_by(PicarImage.id)
        if tag is not None:
            stmt = stmt.where(PicarImage.tag == tag)

        async with self.db.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def tag_names(self) -> List[str]:
        """All rows of the tag table, in insertion order."""
        async with self.db.session() as session:
            result = await session.execute(select(PicarTag.tag).order_by(PicarTag.id))
            return list(result.scalars().all())

    async def ensure_tag(self, tag: str) -> bool:
        """
        Insert a tag if it is not known yet.

        Returns:
            True if the tag was created
        """
        async with self.db.session() as session:
            result = await session.execute(select(PicarTag).where(PicarTag.tag == tag))
            if result.scalars().first() is not None:
                return False

            session.add(PicarTag(tag=tag))
            await session.commit()

        logger.info(f"New tag: {tag}")
        return True

    async def add_images(
        self,
        tag: str,
        img_urls: Sequence[str],
        uploader: str,
        uploader_id: int,
    ) -> int:
        """
        Store images under a tag.

        Every row of one call shares the uploader and a single upload time.

        Args:
            tag: Tag name
            img_urls: Image references (URL or Telegram file_id)
            uploader: Uploader display name
            uploader_id: Numeric uploader id

        Returns:
            Number of rows inserted
        """
        if not img_urls:
            return 0

        upload_time = datetime.now(timezone.utc)
        async with self.db.session() as session:
            session.add_all([
                PicarImage(
                    tag=tag,
                    img_url=url,
                    uploader=uploader,
                    uploader_id=uploader_id,
                    upload_time=upload_time,
                )
                for url in img_urls
            ])
            await session.commit()

        logger.info(f"Added {len(img_urls)} images to tag '{tag}' by {uploader_id}")
        return len(img_urls)
