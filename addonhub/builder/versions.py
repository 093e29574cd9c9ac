# addonhub/builder/versions.py
from typing import List, Optional, Sequence

from ..core.errors import AmbiguousDevelopmentVersion, NoDevelopmentVersion, NoVersionsAvailable
from ..domain.models import Package, Version
from ..domain.schemas import PackageVersionDescriptor


def development_version(package: Package) -> Version:
    versions = package.development_versions()
    if not versions:
        raise NoDevelopmentVersion(f"{package.name} has no development version")
    if len(versions) > 1:
        found = ", ".join(v.version for v in versions)
        raise AmbiguousDevelopmentVersion(f"{package.name} has several development versions: {found}")
    return versions[0]


def matching_descriptors(
    package: Package, descriptors: Optional[Sequence[PackageVersionDescriptor]]
) -> List[PackageVersionDescriptor]:
    """
    Pair the package's development version with the registry's versions.

    Every descriptor whose normalized version equals the local one is
    returned, in registry order. A well-formed feed yields at most one.
    """
    if not descriptors:
        raise NoVersionsAvailable(f"Could not find corresponding Packagist versions for {package.name}")

    target = development_version(package).version
    return [d for d in descriptors if d.version_normalized == target]


def resolve_version(
    package: Package, descriptors: Optional[Sequence[PackageVersionDescriptor]]
) -> Optional[PackageVersionDescriptor]:
    matches = matching_descriptors(package, descriptors)
    return matches[0] if matches else None
