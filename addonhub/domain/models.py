# addonhub/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from ..core.versioning import version_key


@dataclass
class Version:
    version: str
    pretty_version: str
    development: bool = False


@dataclass
class Screenshot:
    key: str
    name: str
    size: int = 0


@dataclass
class Package:
    name: str
    description: str | None = None
    type: str | None = None
    readme: str | None = None
    repository: str | None = None
    downloads: int = 0
    released: datetime | None = None
    last_updated: datetime | None = None
    last_built: datetime | None = None
    build_queued: bool = False
    versions: List[Version] = field(default_factory=list)
    screenshots: List[Screenshot] = field(default_factory=list)

    @property
    def vendor_name(self) -> str:
        return self.name.split("/", 1)[0]

    @property
    def package_name(self) -> str:
        return self.name.split("/", 1)[-1]

    @property
    def packagist_url(self) -> str:
        return f"https://packagist.org/packages/{self.name}"

    def development_versions(self) -> List[Version]:
        return [v for v in self.versions if v.development]

    def sorted_versions(self) -> List[Version]:
        """Versions from newest to oldest."""
        return sorted(self.versions, key=lambda v: version_key(v.version), reverse=True)
