# addonhub/core/errors.py

class BuildError(Exception):
    """Raised when an add-on build has to be abandoned."""


class RegistryError(BuildError):
    """The package registry could not be queried."""


class NoVersionsAvailable(BuildError):
    """The registry returned no versions for the package."""


class NoDevelopmentVersion(BuildError):
    """The package has no local version flagged as development."""


class AmbiguousDevelopmentVersion(NoDevelopmentVersion):
    """More than one local version is flagged as development."""


class ArtifactFetchError(BuildError):
    """The package contents could not be downloaded or extracted."""


class MarkdownRenderError(Exception): ...
