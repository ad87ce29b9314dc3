"""Plugins package."""

from picar.plugins.gallery import GalleryPlugin
from picar.plugins.picture_commands import PictureCommandsPlugin

__all__ = [
    'GalleryPlugin',
    'PictureCommandsPlugin',
]
