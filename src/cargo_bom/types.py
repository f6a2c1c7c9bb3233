from __future__ import annotations

"""Shared data structures for the BOM pipeline.

The definitions live in domain-focused modules; this module keeps a single
stable import path for callers and tests.
"""

from .types_licenses import LICENSE_FILE_PREFIXES, DeclaredFile, Identifiers, LicenseClassification, Missing
from .types_packages import DeclaredDependency, DependencyKind, Package, ResolvedEdge, ResolvedWorkspace
from .types_report import LicenseBundle, Report, ReportRow

__all__ = [
    "DeclaredDependency",
    "DeclaredFile",
    "DependencyKind",
    "Identifiers",
    "LICENSE_FILE_PREFIXES",
    "LicenseBundle",
    "LicenseClassification",
    "Missing",
    "Package",
    "Report",
    "ReportRow",
    "ResolvedEdge",
    "ResolvedWorkspace",
]
