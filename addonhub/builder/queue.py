# addonhub/builder/queue.py
from loguru import logger

from ..core.errors import BuildError
from ..domain.repos import PackageRepo
from ..domain.schemas import BuildReport
from .addon_builder import AddonBuilder


def build_queued(builder: AddonBuilder, repo: PackageRepo) -> BuildReport:
    """
    Build every package that is queued or has never been built. A failure
    is recorded and leaves the package queued; the run carries on.
    """
    report = BuildReport()
    for package in repo.list_queued():
        # only persisted when the build succeeds
        package.build_queued = False
        try:
            builder.build(package)
        except BuildError as e:
            logger.error("Build of {} failed: {}", package.name, e)
            report.failed[package.name] = str(e)
            continue
        except Exception as e:
            logger.exception("Unexpected error building {}", package.name)
            report.failed[package.name] = f"unexpected error: {e}"
            continue
        report.built.append(package.name)

    logger.info("Built {} package(s), {} failed", len(report.built), len(report.failed))
    return report
