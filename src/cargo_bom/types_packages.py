from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class DependencyKind(str, Enum):
    NORMAL = "normal"
    BUILD = "build"
    DEVELOPMENT = "dev"

    @classmethod
    def from_metadata(cls, value: Optional[str]) -> "DependencyKind":
        # cargo metadata reports normal dependencies with a null kind
        if value is None or value == "normal":
            return cls.NORMAL
        return cls(value)


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency as written in a package manifest."""

    name: str
    kind: DependencyKind = DependencyKind.NORMAL
    rename: Optional[str] = None


@dataclass(frozen=True)
class ResolvedEdge:
    """An edge of the resolved graph, pointing at a concrete package id."""

    target: str
    name: str
    kinds: frozenset[DependencyKind] = frozenset({DependencyKind.NORMAL})


@dataclass(frozen=True)
class Package:
    id: str
    name: str
    version: str
    manifest_dir: Path
    license: Optional[str] = None
    license_file: Optional[str] = None
    dependencies: tuple[DeclaredDependency, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.version)


@dataclass
class ResolvedWorkspace:
    """Output of a resolver: every package, the members, and the edges between them."""

    packages: Dict[str, Package]
    workspace_members: List[str]
    edges: Dict[str, List[ResolvedEdge]] = field(default_factory=dict)

    def edges_from(self, package_id: str) -> List[ResolvedEdge]:
        return self.edges.get(package_id, [])
