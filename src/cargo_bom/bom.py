from __future__ import annotations

import logging
from typing import Optional

from .config import BomConfig, EnumerationMode
from .dependency_enumerator import enumerate_dependencies
from .license_classifier import classify_package
from .license_locator import locate_package_license_files
from .resolver import CargoMetadataResolver, Resolver
from .types import LicenseBundle, Report, ReportRow, ResolvedWorkspace

logger = logging.getLogger(__name__)


def build_report(workspace: ResolvedWorkspace, mode: EnumerationMode = EnumerationMode.TOP_LEVEL) -> Report:
    rows: list[ReportRow] = []
    bundles: list[LicenseBundle] = []
    for package in enumerate_dependencies(workspace, mode):
        rows.append(ReportRow(package.name, package.version, classify_package(package)))
        bundles.append(LicenseBundle(package.name, package.version, locate_package_license_files(package)))

    logger.info("collected license data for %d dependencies", len(rows))
    return Report(rows=rows, bundles=bundles)


def generate_report(config: BomConfig, resolver: Optional[Resolver] = None) -> Report:
    """Resolve the workspace named by ``config`` and build its report."""

    resolver = resolver or CargoMetadataResolver.from_config(config)
    workspace = resolver.resolve(config.manifest_path)
    return build_report(workspace, config.mode)
