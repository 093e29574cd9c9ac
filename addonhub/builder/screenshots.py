# addonhub/builder/screenshots.py
import hashlib
import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

import requests
from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..core.paths import is_safe_path
from ..domain.models import Package, Screenshot
from ..domain.storage import BlobStore


@dataclass
class UploadedFile:
    name: str
    size: int
    tmp_path: str


@dataclass
class ScreenshotValidator:
    max_bytes: int = 2 * 1024 * 1024
    allowed_extensions: tuple = ("jpg", "jpeg", "png", "gif")
    allowed_formats: tuple = ("JPEG", "PNG", "GIF")

    def validate(self, upload: UploadedFile) -> Optional[str]:
        """Return a reason the file is not an acceptable screenshot, or None."""
        ext = os.path.splitext(upload.name)[1].lower().lstrip(".")
        if ext not in self.allowed_extensions:
            return f"extension '{ext}' is not allowed"
        if upload.size <= 0:
            return "file is empty"
        if upload.size > self.max_bytes:
            return f"file is {upload.size} bytes, limit is {self.max_bytes}"
        try:
            with Image.open(upload.tmp_path) as img:
                fmt = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            return f"not a readable image: {e}"
        if fmt not in self.allowed_formats:
            return f"image format {fmt} is not allowed"
        return None


@dataclass
class ScreenshotIngester:
    blobs: BlobStore
    validator: ScreenshotValidator = field(default_factory=ScreenshotValidator)

    def ingest(self, upload: UploadedFile, namespace: str) -> Optional[Screenshot]:
        """Validate ``upload`` and store it under ``namespace``."""
        reason = self.validator.validate(upload)
        if reason:
            logger.warning("Rejected screenshot {}: {}", upload.name, reason)
            return None
        key = self._unique_key(namespace, upload.name)
        self.blobs.put(key, upload.tmp_path)
        logger.debug("Stored screenshot {} as {}", upload.name, key)
        return Screenshot(key=key, name=upload.name, size=upload.size)

    def _unique_key(self, namespace: str, name: str) -> str:
        stem, ext = os.path.splitext(name)
        key = f"{namespace}/{name}"
        n = 2
        while self.blobs.exists(key):
            key = f"{namespace}/{stem}-v{n}{ext}"
            n += 1
        return key


def screenshot_references(extra: Optional[Mapping[str, Any]]) -> List[str]:
    """
    Read the screenshot list declared in a package's ``extra`` section.
    ``screenshots`` wins over ``screenshot``; either may be a single value
    or a list, and anything that is not a string is dropped.
    """
    if not extra:
        return []
    value = extra.get("screenshots")
    if value is None:
        value = extra.get("screenshot")
    if value is None:
        return []
    if isinstance(value, dict):
        items = list(value.values())
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]
    return [item for item in items if isinstance(item, str)]


def is_remote(reference: str) -> bool:
    try:
        return urlparse(reference).scheme in ("http", "https")
    except ValueError:
        # unparseable URL, e.g. an unbalanced IPv6 bracket
        return False


@dataclass
class ScreenshotBuilder:
    ingester: ScreenshotIngester
    blobs: BlobStore
    temp_root: str
    screenshots_dir: str = "screenshots"
    timeout: int = 30

    def build(self, package: Package, path: str | os.PathLike, extra: Optional[Mapping[str, Any]]) -> None:
        """
        Replace ``package.screenshots`` with the screenshots declared in
        ``extra``, read from the artifact at ``path`` or downloaded.
        """
        references = screenshot_references(extra)
        target = f"{self.screenshots_dir}/{package.name}"
        root = Path(path).resolve()

        self.clear(package)

        fetched: Dict[str, Optional[str]] = {}
        for reference in references:
            try:
                if is_remote(reference):
                    upload = self._from_url(reference, fetched)
                else:
                    upload = self._from_artifact(reference, root)
            except (ValueError, OSError) as e:
                logger.warning("Skipping screenshot {!r} for {}: {}", reference, package.name, e)
                continue
            if upload is None:
                continue
            try:
                screenshot = self.ingester.ingest(upload, target)
            except Exception as e:
                logger.error("Storing screenshot {} for {} failed: {}", reference, package.name, e)
                continue
            if screenshot:
                package.screenshots.append(screenshot)

        logger.info("{} has {} screenshot(s)", package.name, len(package.screenshots))

    def clear(self, package: Package) -> None:
        for screenshot in package.screenshots:
            self.blobs.delete(screenshot.key)
        package.screenshots.clear()

    def _from_url(self, url: str, fetched: Dict[str, Optional[str]]) -> Optional[UploadedFile]:
        if url not in fetched:
            fetched[url] = self._download(url)
        temp = fetched[url]
        if temp is None:
            return None
        name = posixpath.basename(urlparse(url).path) or os.path.basename(temp)
        return UploadedFile(name=name, size=os.path.getsize(temp), tmp_path=temp)

    def _download(self, url: str) -> Optional[str]:
        os.makedirs(self.temp_root, exist_ok=True)
        temp = os.path.join(self.temp_root, hashlib.md5(url.encode("utf-8")).hexdigest())
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as r:
                r.raise_for_status()
                with open(temp, "wb") as f:
                    for chunk in r.iter_content(chunk_size=65536):
                        f.write(chunk)
        except (requests.RequestException, OSError) as e:
            logger.warning("Could not fetch screenshot {}: {}", url, e)
            return None
        return temp

    def _from_artifact(self, reference: str, root: Path) -> Optional[UploadedFile]:
        # joined as text so "." segments and doubled slashes reach the safety check
        source = os.path.join(str(root), reference.lstrip("/"))
        if not is_safe_path(source, root) or not os.path.isfile(source):
            logger.warning("Screenshot {} is missing or outside the artifact, skipping", reference)
            return None
        return UploadedFile(name=os.path.basename(source), size=os.path.getsize(source), tmp_path=source)
