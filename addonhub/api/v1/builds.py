# addonhub/api/v1/builds.py
from fastapi import APIRouter, Depends, HTTPException

from ... import deps
from ...builder.addon_builder import AddonBuilder
from ...builder.queue import build_queued
from ...core.errors import ArtifactFetchError, NoDevelopmentVersion, NoVersionsAvailable, RegistryError
from ...domain import repos, schemas

router = APIRouter()


@router.post("", response_model=schemas.BuildReport)
def build_all_queued(builder: AddonBuilder = Depends(deps.get_builder),
                     repo: repos.PackageRepo = Depends(deps.get_repo)):
    return build_queued(builder, repo)


@router.post("/{vendor}/{name}", response_model=schemas.BuildResult)
def build_package(vendor: str, name: str,
                  builder: AddonBuilder = Depends(deps.get_builder),
                  repo: repos.PackageRepo = Depends(deps.get_repo)):
    pkg = repo.get(f"{vendor}/{name}")
    if not pkg:
        raise HTTPException(status_code=404, detail="Not found")
    try:
        builder.build(pkg)
    except (NoVersionsAvailable, NoDevelopmentVersion) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (ArtifactFetchError, RegistryError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return schemas.BuildResult(
        name=pkg.name, last_built=pkg.last_built,
        screenshots=len(pkg.screenshots), has_readme=pkg.readme is not None,
    )
