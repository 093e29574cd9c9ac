# addonhub/integrations/packagist.py
from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from ..core.errors import RegistryError
from ..domain.schemas import PackageVersionDescriptor

# ------------ tiny TTL cache so a queue run hits Packagist once per package ------------
@dataclass
class _CacheEntry:
    value: List[PackageVersionDescriptor]
    exp: float


@dataclass
class PackagistClient:
    base_url: str = "https://packagist.org"
    timeout: int = 30
    ttl_s: int = 60
    _cache: Dict[str, _CacheEntry] = field(default_factory=dict, repr=False)

    def _cache_get(self, key: str) -> Optional[List[PackageVersionDescriptor]]:
        e = self._cache.get(key)
        if not e: return None
        if e.exp < time.time():
            self._cache.pop(key, None)
            return None
        return e.value

    def _cache_put(self, key: str, value: List[PackageVersionDescriptor]):
        self._cache[key] = _CacheEntry(value=value, exp=time.time() + self.ttl_s)

    def get_package_versions(self, name: str) -> List[PackageVersionDescriptor]:
        """
        Return every published version of ``name`` in the order Packagist
        lists them. An unknown package yields an empty list.
        """
        cached = self._cache_get(name)
        if cached is not None:
            return cached

        url = f"{self.base_url.rstrip('/')}/packages/{name}.json"
        logger.debug("Fetching Packagist versions: {}", url)
        try:
            r = requests.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
            if r.status_code == 404:
                logger.info("Package {} is not on Packagist", name)
                return []
            r.raise_for_status()
            payload = r.json()
        except (requests.RequestException, ValueError) as e:
            raise RegistryError(f"Packagist lookup failed for {name}: {e}") from e

        raw_versions = (payload.get("package") or {}).get("versions") or {}
        if not isinstance(raw_versions, dict):
            raw_versions = {}
        descriptors: List[PackageVersionDescriptor] = []
        for key, raw in raw_versions.items():
            try:
                descriptors.append(PackageVersionDescriptor.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed Packagist version {} of {}: {}", key, name, e)

        self._cache_put(name, descriptors)
        return descriptors
