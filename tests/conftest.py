import shutil
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

from addonhub.builder.addon_builder import AddonBuilder
from addonhub.builder.readme import ReadmeBuilder
from addonhub.builder.screenshots import ScreenshotBuilder, ScreenshotIngester
from addonhub.core.database import make_engine, make_session_factory
from addonhub.core.errors import ArtifactFetchError
from addonhub.domain.models import Package, Version
from addonhub.domain.repos import PackageRepo
from addonhub.domain.schemas import PackageVersionDescriptor
from addonhub.domain.storage import LocalBlobStore
from addonhub.integrations.markdown import LocalMarkdownRenderer, MarkdownRenderer


def make_image(path: Path, fmt: str = "PNG", size=(4, 4)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 30, 30)).save(path, format=fmt)
    return path


def make_descriptor(version: str, **kwargs) -> PackageVersionDescriptor:
    data = {"version": version, "version_normalized": version}
    data.update(kwargs)
    return PackageVersionDescriptor.model_validate(data)


class StubRenderer(MarkdownRenderer):
    """Wraps every line in a paragraph and remembers what it was asked."""

    def __init__(self, output: Optional[str] = None):
        self.output = output
        self.calls: List[tuple] = []

    def render(self, text, context=None):
        self.calls.append((text, context))
        if self.output is not None:
            return self.output
        return "".join(f"<p>{line}</p>" for line in text.splitlines() if line.strip())


class StubRegistry:
    def __init__(self, versions: Optional[List[PackageVersionDescriptor]] = None):
        self.versions = versions or []
        self.calls: List[str] = []

    def get_package_versions(self, name):
        self.calls.append(name)
        return self.versions


class StubDownloader:
    """Copies a prepared directory instead of downloading."""

    def __init__(self, source: Optional[Path] = None, fail: bool = False):
        self.source = source
        self.fail = fail
        self.calls: List[tuple] = []

    def download(self, descriptor, destination):
        self.calls.append((descriptor, Path(destination)))
        if self.fail:
            raise ArtifactFetchError("network unreachable")
        dest = Path(destination)
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(self.source, dest)
        return dest


@pytest.fixture
def repo(tmp_path) -> PackageRepo:
    engine = make_engine(f"sqlite:///{tmp_path / 'addons.db'}")
    return PackageRepo(make_session_factory(engine, create_tables=True))


@pytest.fixture
def blobs(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(str(tmp_path / "assets"))


@pytest.fixture
def artifact(tmp_path) -> Path:
    """An extracted add-on with a readme and one screenshot."""
    root = tmp_path / "source" / "acme" / "widget"
    root.mkdir(parents=True)
    (root / "README.md").write_text("# Widget\nSee [docs](docs/usage.md)\n![shot](docs/shot.png)\n")
    make_image(root / "docs" / "shot.png")
    return root


@pytest.fixture
def widget() -> Package:
    return Package(
        name="acme/widget",
        description="A widget",
        repository="https://github.com/acme/widget",
        versions=[
            Version(version="1.0.0.0", pretty_version="1.0.0"),
            Version(version="2.0.0-dev", pretty_version="2.0.x-dev", development=True),
        ],
    )


@pytest.fixture
def make_builder(tmp_path, repo, blobs):
    def factory(registry, downloader, renderer: Optional[MarkdownRenderer] = None, **kwargs) -> AddonBuilder:
        temp_root = tmp_path / "tmp"
        return AddonBuilder(
            registry=registry,
            downloader=downloader,
            readme_builder=ReadmeBuilder(renderer or LocalMarkdownRenderer()),
            screenshot_builder=ScreenshotBuilder(
                ingester=ScreenshotIngester(blobs),
                blobs=blobs,
                temp_root=str(temp_root / "screenshots"),
            ),
            repo=repo,
            temp_root=str(temp_root),
            **kwargs,
        )
    return factory
