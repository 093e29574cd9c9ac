"""Tests for the /v1/builds endpoints."""

import pytest
from fastapi.testclient import TestClient

from addonhub import deps
from addonhub.core.errors import RegistryError
from addonhub.main import create_app
from tests.conftest import StubDownloader, StubRegistry, make_descriptor


class ErrorRegistry:
    def get_package_versions(self, name):
        raise RegistryError("Packagist is down")


@pytest.fixture
def app(repo, widget):
    repo.save(widget)
    app = create_app()
    app.dependency_overrides[deps.get_repo] = lambda: repo
    return app


def use_builder(app, builder):
    app.dependency_overrides[deps.get_builder] = lambda: builder


class TestBuildPackage:

    def test_successful_build(self, app, make_builder, artifact, repo):
        descriptor = make_descriptor("2.0.0-dev", extra={"screenshot": "docs/shot.png"})
        use_builder(app, make_builder(StubRegistry([descriptor]), StubDownloader(artifact)))

        response = TestClient(app).post("/v1/builds/acme/widget")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "acme/widget"
        assert data["screenshots"] == 1
        assert data["has_readme"] is True
        assert repo.get("acme/widget").last_built is not None

    def test_unknown_package(self, app, make_builder):
        use_builder(app, make_builder(StubRegistry(), StubDownloader()))
        assert TestClient(app).post("/v1/builds/acme/nothing").status_code == 404

    def test_no_versions_is_conflict(self, app, make_builder, repo):
        use_builder(app, make_builder(StubRegistry([]), StubDownloader()))
        response = TestClient(app).post("/v1/builds/acme/widget")
        assert response.status_code == 409
        assert repo.get("acme/widget").last_built is None

    def test_download_failure_is_bad_gateway(self, app, make_builder):
        use_builder(app, make_builder(StubRegistry([make_descriptor("2.0.0-dev")]), StubDownloader(fail=True)))
        assert TestClient(app).post("/v1/builds/acme/widget").status_code == 502

    def test_registry_failure_is_bad_gateway(self, app, make_builder):
        use_builder(app, make_builder(ErrorRegistry(), StubDownloader()))
        response = TestClient(app).post("/v1/builds/acme/widget")
        assert response.status_code == 502
        assert "Packagist is down" in response.json()["detail"]


class TestBuildQueued:

    def test_builds_queue(self, app, make_builder, artifact):
        use_builder(app, make_builder(StubRegistry([make_descriptor("2.0.0-dev")]), StubDownloader(artifact)))
        response = TestClient(app).post("/v1/builds")
        assert response.status_code == 200
        assert response.json() == {"built": ["acme/widget"], "failed": {}}
