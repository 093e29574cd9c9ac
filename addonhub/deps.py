# addonhub/deps.py
from __future__ import annotations
import os

from .builder.addon_builder import AddonBuilder
from .builder.readme import ReadmeBuilder
from .builder.screenshots import ScreenshotBuilder, ScreenshotIngester, ScreenshotValidator
from .core.config import Settings, get_settings
from .domain import repos, storage
from .integrations.downloads import DownloadManager
from .integrations.github import GitHubMarkdownRenderer
from .integrations.markdown import LocalMarkdownRenderer, MarkdownRenderer
from .integrations.packagist import PackagistClient


def get_repo() -> repos.PackageRepo:
    return repos.get_repo()

def get_blob_store() -> storage.BlobStore:
    return storage.get_blob_store()

def get_renderer(settings: Settings | None = None) -> MarkdownRenderer:
    s = settings or get_settings()
    if s.MARKDOWN_RENDERER == "github":
        return GitHubMarkdownRenderer(api_url=s.GITHUB_API_URL, token=s.GITHUB_TOKEN, timeout=s.HTTP_TIMEOUT)
    if s.MARKDOWN_RENDERER == "local":
        return LocalMarkdownRenderer()
    raise NotImplementedError(f"Unknown MARKDOWN_RENDERER={s.MARKDOWN_RENDERER}")

def get_builder() -> AddonBuilder:
    s = get_settings()
    blobs = get_blob_store()
    ingester = ScreenshotIngester(blobs, ScreenshotValidator(max_bytes=s.SCREENSHOT_MAX_BYTES))
    return AddonBuilder(
        registry=PackagistClient(base_url=s.PACKAGIST_URL, timeout=s.HTTP_TIMEOUT),
        downloader=DownloadManager(timeout=s.HTTP_TIMEOUT),
        readme_builder=ReadmeBuilder(get_renderer(s), default_branch=s.DEFAULT_BRANCH),
        screenshot_builder=ScreenshotBuilder(
            ingester=ingester,
            blobs=blobs,
            temp_root=os.path.join(s.TEMP_ROOT, s.SCREENSHOTS_DIR),
            screenshots_dir=s.SCREENSHOTS_DIR,
            timeout=s.HTTP_TIMEOUT,
        ),
        repo=get_repo(),
        temp_root=s.TEMP_ROOT,
        addons_dir=s.ADDONS_DIR,
    )
