"""
addon_builder.py
================

Downloads an add-on and builds its detail information.

For the package's development version the builder:

1. pairs it with the matching Packagist version
2. downloads that version to ``<temp_root>/<addons_dir>/<vendor>/<name>``
3. renders the readme into sanitized HTML
4. replaces the screenshot set
5. stamps ``last_built`` with the time the build started and saves the package

Registry, download and version-pairing failures raise BuildError before any
documentation or screenshot is touched. Missing readmes and broken
screenshots are logged and skipped.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from loguru import logger

from ..domain.models import Package
from ..domain.repos import PackageRepo
from ..integrations.downloads import DownloadManager
from ..integrations.packagist import PackagistClient
from .readme import ReadmeBuilder
from .screenshots import ScreenshotBuilder
from .versions import matching_descriptors


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AddonBuilder:
    registry: PackagistClient
    downloader: DownloadManager
    readme_builder: ReadmeBuilder
    screenshot_builder: ScreenshotBuilder
    repo: PackageRepo
    temp_root: str
    addons_dir: str = "add-ons"
    clock: Callable[[], datetime] = field(default=_utcnow)

    def artifact_path(self, package: Package) -> Path:
        return Path(self.temp_root) / self.addons_dir / package.name

    def build(self, package: Package) -> Package:
        """
        Build ``package`` and persist it.

        Raises:
            NoVersionsAvailable: Packagist has no versions for the package
            NoDevelopmentVersion: no single local development version exists
            ArtifactFetchError: the matching version could not be downloaded
            RegistryError: Packagist could not be queried
        """
        started = self.clock()
        logger.info("Building {}", package.name)

        descriptors = self.registry.get_package_versions(package.name)
        matches = matching_descriptors(package, descriptors)
        if not matches:
            logger.warning("No Packagist version of {} matches its development version", package.name)

        for descriptor in matches:
            path = self.artifact_path(package)
            self.downloader.download(descriptor, path)

            readme = self.readme_builder.build(package, path)
            if readme is not None:
                package.readme = readme

            self.screenshot_builder.build(package, path, descriptor.extra)

        package.last_built = started
        self.repo.save(package)
        logger.info("Built {} ({})", package.name, started.isoformat())
        return package
