"""
readme.py
=========

Turns the readme shipped inside a downloaded add-on into sanitized HTML.

Process
-------
1. Probe the known readme locations in priority order
2. Render markdown to HTML (GitHub repositories pass ``owner/repo`` as context)
3. Sanitize the HTML with nh3
4. Point relative links and images at the GitHub repository

An add-on without a readme, or whose readme renders to nothing, yields None
so previously built documentation is kept.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import nh3
from bs4 import BeautifulSoup
from loguru import logger

from ..core.errors import MarkdownRenderError
from ..core.links import is_relative_uri
from ..core.paths import is_safe_path
from ..domain.models import Package
from ..integrations.github import github_context, has_github_repository
from ..integrations.markdown import MarkdownRenderer

README_CANDIDATES = [
    "README.md",
    "README.markdown",
    "README.mdown",
    "docs/en/index.md",
]


def candidate_paths(root: str | os.PathLike) -> List[Path]:
    """Readme locations under ``root`` in the order they are tried."""
    names: List[str] = []
    for candidate in README_CANDIDATES:
        for name in (candidate, candidate.lower()):
            if name not in names:
                names.append(name)
    return [Path(root) / name for name in names]


def find_readme(root: str | os.PathLike) -> Optional[Path]:
    root = Path(root).resolve()
    for path in candidate_paths(root):
        if not path.is_file() or path.stat().st_size == 0:
            continue
        if not is_safe_path(path, root):
            logger.warning("Ignoring readme {} resolving outside the artifact", path)
            continue
        return path
    return None


@dataclass
class HtmlSanitizer:
    """Allow-list sanitizer keeping structural and inline formatting markup."""

    tags: set = field(default_factory=lambda: {
        "a", "abbr", "b", "blockquote", "br", "code", "dd", "del", "details", "div",
        "dl", "dt", "em", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins",
        "kbd", "li", "ol", "p", "pre", "s", "samp", "span", "strike", "strong", "sub",
        "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "tt",
        "ul", "var",
    })
    attributes: dict = field(default_factory=lambda: {
        "a": {"href", "name", "title"},
        "img": {"src", "alt", "title", "width", "height", "align"},
        "td": {"align", "colspan", "rowspan"},
        "th": {"align", "colspan", "rowspan"},
        "div": {"align"},
        "p": {"align"},
        "code": {"class"},
        "pre": {"lang"},
    })
    url_schemes: set = field(default_factory=lambda: {"http", "https", "mailto"})

    def sanitize(self, html: str) -> str:
        return nh3.clean(
            html,
            tags=self.tags,
            attributes=self.attributes,
            url_schemes=self.url_schemes,
        )


def replace_relative_links(html: str, repository: str, branch: str = "master") -> str:
    """
    Rewrite relative ``<a href>`` and ``<img src>`` references in ``html`` so
    they point into ``repository`` on GitHub: links to the ``blob`` view,
    images to the ``raw`` file.
    """
    soup = BeautifulSoup(f"<div>{html}</div>", "html.parser")
    wrapper = soup.div

    def linkable(tag) -> bool:
        return (tag.name == "a" and tag.has_attr("href")) or (tag.name == "img" and tag.has_attr("src"))

    for element in wrapper.find_all(linkable):
        attribute = "href" if element.name == "a" else "src"
        path = element[attribute]
        if not is_relative_uri(path):
            continue
        folder = "blob" if attribute == "href" else "raw"
        element[attribute] = "/".join([repository, folder, branch, path])

    return "".join(str(child) for child in wrapper.contents)


@dataclass
class ReadmeBuilder:
    renderer: MarkdownRenderer
    sanitizer: HtmlSanitizer = field(default_factory=HtmlSanitizer)
    default_branch: str = "master"

    def build(self, package: Package, path: str | os.PathLike, repository: str | None = None) -> Optional[str]:
        """
        Build the readme HTML for ``package`` from the artifact at ``path``.

        Returns:
            Optional[str]: sanitized HTML, or None when there is nothing to show
        """
        repository = repository if repository is not None else package.repository
        source = find_readme(path)
        if source is None:
            logger.info("No readme found for {}", package.name)
            return None

        logger.debug("Rendering readme {} for {}", source, package.name)
        text = source.read_text(encoding="utf-8", errors="replace")
        try:
            html = self.renderer.render(text, github_context(repository))
        except MarkdownRenderError as e:
            logger.warning("Could not render readme for {}: {}", package.name, e)
            return None
        if not html or not html.strip():
            logger.info("Readme for {} rendered empty", package.name)
            return None

        html = self.sanitizer.sanitize(html)
        if not html.strip():
            logger.info("Readme for {} was empty after sanitizing", package.name)
            return None

        if has_github_repository(repository):
            html = replace_relative_links(html, repository, self.default_branch)
        return html
