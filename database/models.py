"""Database models - tagged image gallery schema."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, BigInteger, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class PicarImage(Base):
    """Images saved under a tag with `/goodpic add`."""
    __tablename__ = "picar_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tag = Column(String, nullable=False)
    img_url = Column(Text, nullable=False)  # URL or Telegram file_id
    uploader = Column(String, nullable=False)
    uploader_id = Column("uploaderId", BigInteger, nullable=False, default=0)
    upload_time = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_picar_images_tag", "tag"),
    )

    def __repr__(self):
        return f"<PicarImage(id={self.id}, tag={self.tag}, uploader_id={self.uploader_id})>"


class PicarTag(Base):
    """Known tags. Not linked to picar_images.tag by a foreign key."""
    __tablename__ = "picar_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tag = Column(String, nullable=False, unique=True)

    def __repr__(self):
        return f"<PicarTag(id={self.id}, tag={self.tag})>"
