# addonhub/domain/repos.py
from typing import List, Optional

from sqlalchemy import or_, select

from ..core.database import get_db
from .db_models import PackageModel, ScreenshotModel, VersionModel
from .models import Package


def get_repo():
    return PackageRepo()


class PackageRepo:
    """Loads and stores add-on packages with their versions and screenshots."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def get(self, name: str) -> Optional[Package]:
        with get_db(self._session_factory) as db:
            row = db.get(PackageModel, name)
            return row.to_domain() if row else None

    def save(self, pkg: Package) -> Package:
        with get_db(self._session_factory) as db:
            row = db.get(PackageModel, pkg.name)
            if row is None:
                row = PackageModel(name=pkg.name)
                db.add(row)
            row.description = pkg.description
            row.type = pkg.type
            row.readme = pkg.readme
            row.repository = pkg.repository
            row.downloads = pkg.downloads
            row.released = pkg.released
            row.last_updated = pkg.last_updated
            row.last_built = pkg.last_built
            row.build_queued = pkg.build_queued
            # collections are always replaced wholesale
            row.versions = [
                VersionModel(version=v.version, pretty_version=v.pretty_version, development=v.development)
                for v in pkg.versions
            ]
            row.screenshots = [
                ScreenshotModel(key=s.key, name=s.name, size=s.size) for s in pkg.screenshots
            ]
        return pkg

    def list_all(self) -> List[Package]:
        with get_db(self._session_factory) as db:
            rows = db.scalars(select(PackageModel).order_by(PackageModel.name)).all()
            return [r.to_domain() for r in rows]

    def list_queued(self) -> List[Package]:
        """Packages flagged for a build, or never built at all."""
        with get_db(self._session_factory) as db:
            stmt = (
                select(PackageModel)
                .where(or_(PackageModel.build_queued.is_(True), PackageModel.last_built.is_(None)))
                .order_by(PackageModel.name)
            )
            return [r.to_domain() for r in db.scalars(stmt).all()]
