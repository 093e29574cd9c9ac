# addonhub/integrations/github.py
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
from loguru import logger

from ..core.errors import MarkdownRenderError
from .markdown import MarkdownRenderer

_REPO_URL = re.compile(
    r"^https?://github\.com/(?P<owner>[^/\s]+)/(?P<name>[^/\s]+?)(?:\.git)?/?$",
    re.IGNORECASE,
)

# ------------ utilities ------------
def parse_repo_owner_name(repo_url: str | None) -> Optional[Tuple[str, str]]:
    # Accept forms like:
    #  - https://github.com/owner/name
    #  - https://github.com/owner/name.git
    if not repo_url:
        return None
    m = _REPO_URL.match(repo_url.strip())
    if not m:
        return None
    return m.group("owner"), m.group("name")


def github_context(repo_url: str | None) -> Optional[str]:
    """Return ``owner/name`` for a GitHub repository URL, else None."""
    parsed = parse_repo_owner_name(repo_url)
    if not parsed:
        return None
    return "/".join(parsed)


def has_github_repository(repo_url: str | None) -> bool:
    return bool(repo_url) and "github.com" in repo_url

# ------------ markdown API ------------
@dataclass
class GitHubMarkdownRenderer(MarkdownRenderer):
    """Renders through GitHub's /markdown endpoint so output matches github.com."""

    api_url: str = "https://api.github.com"
    token: str = ""
    timeout: int = 30

    def render(self, text: str, context: Optional[str] = None) -> str:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        body = {"text": text, "mode": "gfm"}
        if context:
            body["context"] = context

        try:
            r = requests.post(
                f"{self.api_url.rstrip('/')}/markdown", json=body, headers=headers, timeout=self.timeout
            )
            r.raise_for_status()
        except requests.RequestException as e:
            logger.warning("GitHub markdown API error: {}", e)
            raise MarkdownRenderError(str(e)) from e
        return r.text
