"""Tests for DownloadManager and zip extraction."""

import io
import zipfile
from unittest.mock import MagicMock, patch

import pytest
import requests
from git.exc import GitCommandError

from addonhub.core.errors import ArtifactFetchError
from addonhub.integrations.downloads import DownloadManager, extract_zip
from tests.conftest import make_descriptor

DIST = {"url": "https://api.github.com/repos/acme/widget/zipball/abc", "type": "zip", "reference": "abc"}
SOURCE = {"url": "https://github.com/acme/widget.git", "type": "git", "reference": "abc"}


def zip_bytes(entries: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


def streamed(content: bytes) -> MagicMock:
    r = MagicMock()
    r.__enter__.return_value = r
    r.iter_content.return_value = [content]
    return r


class TestExtractZip:

    def test_strips_single_top_level_folder(self, tmp_path):
        archive = tmp_path / "a.zip"
        archive.write_bytes(zip_bytes({
            "acme-widget-abc/README.md": "# Widget",
            "acme-widget-abc/docs/shot.png": "png",
        }))
        dest = tmp_path / "out"
        dest.mkdir()
        extract_zip(archive, dest)
        assert (dest / "README.md").read_text() == "# Widget"
        assert (dest / "docs" / "shot.png").exists()

    def test_keeps_layout_without_common_folder(self, tmp_path):
        archive = tmp_path / "a.zip"
        archive.write_bytes(zip_bytes({"README.md": "x", "src/Widget.php": "<?php"}))
        dest = tmp_path / "out"
        dest.mkdir()
        extract_zip(archive, dest)
        assert (dest / "README.md").exists()
        assert (dest / "src" / "Widget.php").exists()

    def test_refuses_entries_outside_destination(self, tmp_path):
        archive = tmp_path / "a.zip"
        archive.write_bytes(zip_bytes({"README.md": "x", "../evil.txt": "boom"}))
        dest = tmp_path / "out"
        dest.mkdir()
        with pytest.raises(ArtifactFetchError):
            extract_zip(archive, dest)
        assert not (tmp_path / "evil.txt").exists()


class TestDownloadManager:

    @patch("addonhub.integrations.downloads.requests.get")
    def test_downloads_dist_zip(self, mock_get, tmp_path):
        mock_get.return_value = streamed(zip_bytes({"widget/README.md": "# Widget"}))
        dest = tmp_path / "add-ons" / "acme" / "widget"
        dest.mkdir(parents=True)
        (dest / "stale.txt").write_text("old build")

        result = DownloadManager().download(make_descriptor("2.0.0-dev", dist=DIST), dest)

        assert result == dest
        assert (dest / "README.md").read_text() == "# Widget"
        assert not (dest / "stale.txt").exists()
        assert mock_get.call_args[0][0] == DIST["url"]

    @patch("addonhub.integrations.downloads.Repo.clone_from")
    @patch("addonhub.integrations.downloads.requests.get")
    def test_falls_back_to_git_source(self, mock_get, mock_clone, tmp_path):
        mock_get.side_effect = requests.ConnectionError("offline")
        repo = MagicMock()
        mock_clone.return_value = repo
        dest = tmp_path / "widget"

        DownloadManager().download(make_descriptor("2.0.0-dev", dist=DIST, source=SOURCE), dest)

        mock_clone.assert_called_once_with(SOURCE["url"], str(dest))
        repo.git.checkout.assert_called_once_with("abc")

    @patch("addonhub.integrations.downloads.Repo.clone_from")
    def test_git_only_source(self, mock_clone, tmp_path):
        DownloadManager().download(make_descriptor("2.0.0-dev", source=SOURCE), tmp_path / "widget")
        assert mock_clone.call_count == 1

    def test_nothing_to_download(self, tmp_path):
        descriptor = make_descriptor("2.0.0-dev", dist={"url": "https://x/a.tar", "type": "tar"})
        with pytest.raises(ArtifactFetchError):
            DownloadManager().download(descriptor, tmp_path / "widget")

    @patch("addonhub.integrations.downloads.Repo.clone_from")
    @patch("addonhub.integrations.downloads.requests.get")
    def test_all_attempts_failing_raises(self, mock_get, mock_clone, tmp_path):
        mock_get.return_value = streamed(b"this is not a zip")
        mock_clone.side_effect = GitCommandError("clone", 128)
        descriptor = make_descriptor("2.0.0-dev", dist=DIST, source=SOURCE)

        with pytest.raises(ArtifactFetchError) as excinfo:
            DownloadManager().download(descriptor, tmp_path / "widget")
        assert "dist" in str(excinfo.value)
        assert "source" in str(excinfo.value)
