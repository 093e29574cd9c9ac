"""
downloads.py
============

Materialises one Packagist version of an add-on on local disk.

Strategy
--------
1. Prefer the ``dist`` reference when it is a zip archive: download it with
   requests and extract it, dropping the single top-level folder GitHub
   zipballs wrap everything in.
2. Fall back to the ``source`` reference when it is a git repository: clone
   with GitPython and check out the pinned reference.

The destination directory is wiped first so stale files from an earlier
build never survive into this one. Any failure is reported as
ArtifactFetchError, which aborts the build.
"""

import os
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

import requests
from git import Repo
from git.exc import GitError
from loguru import logger

from ..core.errors import ArtifactFetchError
from ..domain.schemas import PackageVersionDescriptor, SourceReference


@dataclass
class DownloadManager:
    timeout: int = 30

    def download(self, descriptor: PackageVersionDescriptor, destination: str | os.PathLike) -> Path:
        """
        Download ``descriptor`` into ``destination``.

        Returns:
            Path: the populated destination directory
        """
        dest = Path(destination)
        label = f"{descriptor.name or dest.name}@{descriptor.version}"
        attempts = []
        if descriptor.dist and descriptor.dist.url and (descriptor.dist.type or "zip") == "zip":
            attempts.append(("dist", descriptor.dist))
        if descriptor.source and descriptor.source.url and descriptor.source.type == "git":
            attempts.append(("source", descriptor.source))

        if not attempts:
            raise ArtifactFetchError(f"{label} has no zip dist or git source to download")

        errors: List[str] = []
        for kind, ref in attempts:
            self._reset(dest)
            try:
                if kind == "dist":
                    self._fetch_zip(ref, dest)
                else:
                    self._clone(ref, dest)
                logger.info("Downloaded {} from {} {}", label, kind, ref.url)
                return dest
            except (requests.RequestException, zipfile.BadZipFile, GitError, OSError, ArtifactFetchError) as e:
                logger.warning("Downloading {} from {} failed: {}", label, kind, e)
                errors.append(f"{kind}: {e}")

        raise ArtifactFetchError(f"Could not download {label}: " + "; ".join(errors))

    def _reset(self, dest: Path) -> None:
        if dest.exists():
            shutil.rmtree(dest)
        dest.mkdir(parents=True)

    def _fetch_zip(self, ref: SourceReference, dest: Path) -> None:
        fd, archive = tempfile.mkstemp(suffix=".zip")
        os.close(fd)
        try:
            with requests.get(ref.url, stream=True, timeout=self.timeout) as r:
                r.raise_for_status()
                with open(archive, "wb") as f:
                    for chunk in r.iter_content(chunk_size=65536):
                        f.write(chunk)
            extract_zip(archive, dest)
        finally:
            os.remove(archive)

    def _clone(self, ref: SourceReference, dest: Path) -> None:
        logger.debug("Cloning repo: {} → {}", ref.url, dest)
        repo = Repo.clone_from(ref.url, str(dest))
        if ref.reference:
            repo.git.checkout(ref.reference)


def _common_prefix(names: List[str]) -> str:
    tops = {n.split("/", 1)[0] for n in names}
    if len(tops) == 1:
        top = tops.pop()
        if all(n.startswith(top + "/") for n in names):
            return top + "/"
    return ""


def extract_zip(archive: str | os.PathLike, dest: Path) -> None:
    """Extract ``archive`` into ``dest``, refusing entries that would land outside it."""
    root = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        members = [m for m in zf.infolist() if not m.filename.startswith("__MACOSX/")]
        prefix = _common_prefix([m.filename for m in members])
        for member in members:
            rel = member.filename[len(prefix):]
            if not rel:
                continue
            target = (root / rel).resolve()
            if root not in target.parents:
                raise ArtifactFetchError(f"Archive entry escapes destination: {member.filename}")
            if member.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(member) as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)
