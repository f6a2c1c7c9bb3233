from __future__ import annotations

from dataclasses import dataclass
from typing import Union

LICENSE_FILE_PREFIXES = ("LICENSE", "UNLICENSE", "COPYRIGHT")


@dataclass(frozen=True)
class Identifiers:
    names: frozenset[str]

    def __str__(self) -> str:
        return ", ".join(sorted(self.names))


@dataclass(frozen=True)
class DeclaredFile:
    path: str

    def __str__(self) -> str:
        return "Specified in license file"


@dataclass(frozen=True)
class Missing:
    def __str__(self) -> str:
        return "Missing"


LicenseClassification = Union[Identifiers, DeclaredFile, Missing]
