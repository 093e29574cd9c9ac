# addonhub/api/v1/packages.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from ... import deps
from ...domain import repos, schemas
from ...domain.models import Package, Version

router = APIRouter()


def to_detail(p: Package) -> schemas.PackageDetail:
    return schemas.PackageDetail(
        name=p.name, description=p.description, type=p.type,
        repository=p.repository, downloads=p.downloads, readme=p.readme,
        last_built=p.last_built, build_queued=p.build_queued,
        versions=[
            schemas.VersionOut(version=v.version, pretty_version=v.pretty_version, development=v.development)
            for v in p.sorted_versions()
        ],
        screenshots=[schemas.ScreenshotOut(key=s.key, name=s.name, size=s.size) for s in p.screenshots],
    )


@router.post("", response_model=schemas.PackageDetail)
def upsert_package(body: schemas.PackageCreate,
                   repo: repos.PackageRepo = Depends(deps.get_repo)):
    """Register an add-on or refresh its catalog fields; built details are kept."""
    pkg = repo.get(body.name) or Package(name=body.name)
    pkg.description = body.description
    pkg.type = body.type
    pkg.repository = body.repository
    pkg.downloads = body.downloads
    pkg.build_queued = body.build_queued
    pkg.last_updated = datetime.now(timezone.utc)
    pkg.versions = [
        Version(version=v.version, pretty_version=v.pretty_version or v.version, development=v.development)
        for v in body.versions
    ]
    repo.save(pkg)
    return to_detail(pkg)


@router.get("/{vendor}/{name}", response_model=schemas.PackageDetail)
def get_package(vendor: str, name: str, repo: repos.PackageRepo = Depends(deps.get_repo)):
    p = repo.get(f"{vendor}/{name}")
    if not p:
        raise HTTPException(status_code=404, detail="Not found")
    return to_detail(p)
