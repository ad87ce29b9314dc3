"""Services package - image sources and the tag store."""
from picar.services.image_source import ImageSourceService
from picar.services.tag_store import TagStoreService

__all__ = [
    "ImageSourceService",
    "TagStoreService",
]
