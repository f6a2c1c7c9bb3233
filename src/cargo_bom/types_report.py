from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .types_licenses import LicenseClassification


@dataclass(frozen=True, order=True)
class ReportRow:
    name: str
    version: str
    classification: LicenseClassification = field(compare=False)

    @property
    def licenses(self) -> str:
        return str(self.classification)


@dataclass(frozen=True, order=True)
class LicenseBundle:
    name: str
    version: str
    files: tuple[Path, ...] = field(default=(), compare=False)


@dataclass
class Report:
    rows: List[ReportRow] = field(default_factory=list)
    bundles: List[LicenseBundle] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rows = sorted(self.rows)
        self.bundles = sorted(self.bundles)

    @property
    def longest_name(self) -> int:
        return max((len(row.name) for row in self.rows), default=0)

    def non_empty_bundles(self) -> List[LicenseBundle]:
        return [bundle for bundle in self.bundles if bundle.files]
