# addonhub/domain/db_models.py
from datetime import timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _aware(value):
    # SQLite drops tzinfo; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PackageModel(Base):
    __tablename__ = "packages"

    name = Column(String(255), primary_key=True)
    description = Column(Text, nullable=True)
    type = Column(String(100), nullable=True)
    readme = Column(Text, nullable=True)
    repository = Column(String(255), nullable=True)
    downloads = Column(Integer, nullable=False, default=0)
    released = Column(DateTime(timezone=True), nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    last_built = Column(DateTime(timezone=True), nullable=True)
    build_queued = Column(Boolean, nullable=False, default=False)

    versions = relationship(
        "VersionModel", cascade="all, delete-orphan", order_by="VersionModel.id"
    )
    screenshots = relationship(
        "ScreenshotModel", cascade="all, delete-orphan", order_by="ScreenshotModel.id"
    )

    def to_domain(self):
        """Convert database model to domain Package"""
        from .models import Package, Screenshot, Version
        return Package(
            name=self.name,
            description=self.description,
            type=self.type,
            readme=self.readme,
            repository=self.repository,
            downloads=self.downloads or 0,
            released=_aware(self.released),
            last_updated=_aware(self.last_updated),
            last_built=_aware(self.last_built),
            build_queued=bool(self.build_queued),
            versions=[
                Version(version=v.version, pretty_version=v.pretty_version, development=v.development)
                for v in self.versions
            ],
            screenshots=[
                Screenshot(key=s.key, name=s.name, size=s.size) for s in self.screenshots
            ],
        )


class VersionModel(Base):
    __tablename__ = "package_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_name = Column(String(255), ForeignKey("packages.name"), nullable=False, index=True)
    version = Column(String(100), nullable=False)
    pretty_version = Column(String(100), nullable=False)
    development = Column(Boolean, nullable=False, default=False)


class ScreenshotModel(Base):
    __tablename__ = "package_screenshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_name = Column(String(255), ForeignKey("packages.name"), nullable=False, index=True)
    key = Column(String(512), nullable=False)
    name = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False, default=0)
