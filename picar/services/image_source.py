"""Image source service - resolves {pict} placeholders to inline images."""
import asyncio
import json
import logging
import os
import random
import re
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import httpx

from picar.utils.elements import inline_image

logger = logging.getLogger(__name__)

PLACEHOLDER = "{pict}"
FETCH_TIMEOUT = 30.0
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/143.0.0.0 Safari/537.36"
)

_IMAGE_NAME_RE = re.compile(r"\.(jpe?g|png|gif|webp)$", re.IGNORECASE)
_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:\\")


def is_remote(ref: str) -> bool:
    return ref.startswith("http://") or ref.startswith("https://")


def mime_for(ref: str, remote: bool = False) -> str:
    """
    MIME type from a file name suffix.

    webp is only recognised for local files; remote webp images go out as jpeg.
    """
    if remote:
        ext = ref.split(".")[-1].lower() or "jpg"
    else:
        ext = Path(ref).suffix[1:].lower()
    if ext == "png":
        return "image/png"
    if ext == "gif":
        return "image/gif"
    if ext == "webp" and not remote:
        return "image/webp"
    return "image/jpeg"


class ImageSourceService:
    """
    Lists image candidates from a directory or a remote JSON list and inlines them.

    Remote JSON lists are downloaded once per URL and cached under data_dir.
    """

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        data_dir: Optional[Path] = None,
        rng: Optional[random.Random] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the service.

        Args:
            base_dir: Directory relative sources resolve against (default: cwd)
            data_dir: Directory for cached JSON lists (default: base_dir/data)
            rng: Source of randomness for candidate selection
            client: HTTP client; a default one with a 30s timeout is created when omitted
        """
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.data_dir = Path(data_dir) if data_dir else self.base_dir / "data"
        self.rng = rng or random.Random()
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(FETCH_TIMEOUT),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close underlying HTTP resources."""
        try:
            await self._client.aclose()
        except Exception:
            pass

    async def resolve_template(self, template: str, source: str) -> str:
        """
        Replace every {pict} in template with an inline image from source.

        Each placeholder gets its own random candidate and its own fetch.
        A placeholder whose image cannot be loaded is replaced with "".

        Args:
            template: Reply template
            source: Directory path or remote JSON list URL

        Returns:
            The resolved reply
        """
        matches = [m.span() for m in re.finditer(re.escape(PLACEHOLDER), template)]
        if not matches:
            return template

        candidates = await self.list_candidates(source)
        picks = [self.rng.choice(candidates) if candidates else None for _ in matches]
        replacements = await asyncio.gather(*(self._inline(pick) for pick in picks))

        # Splice by offset so inserted payloads are never searched again.
        pieces = []
        position = 0
        for (start, end), replacement in zip(matches, replacements):
            pieces.append(template[position:start])
            pieces.append(replacement)
            position = end
        pieces.append(template[position:])
        return "".join(pieces)

    async def list_candidates(self, source: str) -> list:
        """
        List image candidates for a source.

        Args:
            source: Directory path (relative to base_dir unless absolute) or http(s) URL
                    of a JSON array of image URLs

        Returns:
            List of candidate references; empty on any error
        """
        if not source:
            return []
        if is_remote(source):
            return await self._list_remote(source)
        return await self._list_directory(source)

    def cache_path(self, source: str) -> Path:
        """Local cache file for a remote JSON list."""
        parsed = urlparse(source)
        name = PurePosixPath(parsed.path).name or parsed.netloc
        return self.data_dir / name

    async def fetch_image(self, candidate: str) -> Tuple[bytes, str]:
        """
        Load image bytes and MIME type for a candidate.

        Raises:
            httpx.HTTPError: Remote fetch failed or returned a non-2xx status
            OSError: Local file could not be read
        """
        if is_remote(candidate):
            response = await self._client.get(candidate, headers={"user-agent": USER_AGENT})
            response.raise_for_status()
            return response.content, mime_for(candidate, remote=True)

        data = await asyncio.to_thread(Path(candidate).read_bytes)
        return data, mime_for(candidate)

    async def _inline(self, candidate) -> str:
        if candidate is None:
            return ""
        try:
            data, mime = await self.fetch_image(candidate)
        except Exception as e:
            logger.error(f"Failed to load image {candidate!r}: {e}")
            return ""
        return inline_image(data, mime)

    async def _list_directory(self, source: str) -> List[str]:
        dir_path = Path(source)
        if not source.startswith("/") and not _DRIVE_ROOT_RE.match(source):
            dir_path = self.base_dir / source

        def scan() -> List[str]:
            with os.scandir(dir_path) as entries:
                names = [
                    entry.name
                    for entry in entries
                    if entry.is_file() and _IMAGE_NAME_RE.search(entry.name)
                ]
            return [str(dir_path / name) for name in sorted(names)]

        try:
            return await asyncio.to_thread(scan)
        except OSError as e:
            logger.error(f"Failed to read local image directory {dir_path}: {e}")
            return []

    async def _list_remote(self, source: str) -> list:
        file_path = self.cache_path(source)

        if not file_path.exists():
            try:
                response = await self._client.get(source, timeout=FETCH_TIMEOUT)
                response.raise_for_status()
                await asyncio.to_thread(_write_atomic, file_path, response.content)
                logger.info(f"Cached image list {source} -> {file_path}")
            except Exception as e:
                logger.error(f"Failed to download image list {source}: {e}")
                return []

        try:
            raw = await asyncio.to_thread(file_path.read_bytes)
            links = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read cached image list {file_path}: {e}")
            return []

        return links if isinstance(links, list) else []


def _write_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # One temp file per writer; concurrent first fetches of a URL must not share it.
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".part")
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            tmp_file.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
