"""Dependency resolution through ``cargo metadata``.

Resolution is not done here: cargo already owns manifest parsing, version
selection and workspace membership. This module runs cargo, then maps the
JSON it prints (format version 1) onto :class:`ResolvedWorkspace`. Anything
that can resolve a manifest into that shape can stand in for cargo through
the :class:`Resolver` protocol.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Protocol

try:  # Python < 3.11 compatibility
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - exercised in older runtimes
    import tomli as tomllib  # type: ignore

from .config import BomConfig
from .errors import ResolutionError
from .types import DeclaredDependency, DependencyKind, Package, ResolvedEdge, ResolvedWorkspace

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve(self, manifest_path: Path) -> ResolvedWorkspace:
        ...


def load_manifest(path: Path) -> dict:
    if not path.is_file():
        raise ResolutionError(f"could not find `{path.name}` in `{path.parent}`")
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ResolutionError(f"failed to parse manifest at `{path}`: {exc}") from exc
    except OSError as exc:
        raise ResolutionError(f"failed to read manifest at `{path}`: {exc}") from exc


def _declared_dependencies(entries: Iterable[dict]) -> tuple[DeclaredDependency, ...]:
    declared = []
    for entry in entries:
        declared.append(
            DeclaredDependency(
                name=entry["name"],
                kind=DependencyKind.from_metadata(entry.get("kind")),
                rename=entry.get("rename"),
            )
        )
    return tuple(declared)


def _package_from_metadata(info: dict) -> Package:
    return Package(
        id=info["id"],
        name=info["name"],
        version=str(info["version"]),
        manifest_dir=Path(info["manifest_path"]).parent,
        license=info.get("license"),
        license_file=info.get("license_file"),
        dependencies=_declared_dependencies(info.get("dependencies") or []),
    )


def _kinds_from_declared(source: Package, dep_name: str) -> frozenset[DependencyKind]:
    # Older cargo releases omit dep_kinds; fall back to what the manifest declares.
    normalized = dep_name.replace("-", "_")
    kinds = {
        declared.kind
        for declared in source.dependencies
        if (declared.rename or declared.name).replace("-", "_") == normalized
        or declared.name.replace("-", "_") == normalized
    }
    return frozenset(kinds) if kinds else frozenset({DependencyKind.NORMAL})


def _edges_for_node(node: dict, packages: Dict[str, Package]) -> List[ResolvedEdge]:
    source = packages.get(node["id"])
    edges: list[ResolvedEdge] = []
    if "deps" in node:
        for dep in node["deps"]:
            dep_kinds = dep.get("dep_kinds")
            if dep_kinds:
                kinds = frozenset(DependencyKind.from_metadata(k.get("kind")) for k in dep_kinds)
            elif source is not None:
                kinds = _kinds_from_declared(source, dep["name"])
            else:
                kinds = frozenset({DependencyKind.NORMAL})
            edges.append(ResolvedEdge(target=dep["pkg"], name=dep["name"], kinds=kinds))
        return edges

    for target in node.get("dependencies") or []:
        target_pkg = packages.get(target)
        name = target_pkg.name if target_pkg else target
        kinds = _kinds_from_declared(source, name) if source else frozenset({DependencyKind.NORMAL})
        edges.append(ResolvedEdge(target=target, name=name, kinds=kinds))
    return edges


def parse_metadata(metadata: dict) -> ResolvedWorkspace:
    """Map ``cargo metadata --format-version 1`` output onto a ResolvedWorkspace."""

    try:
        packages: Dict[str, Package] = {}
        for info in metadata["packages"]:
            package = _package_from_metadata(info)
            packages[package.id] = package

        members = list(metadata.get("workspace_members") or [])
        unknown = [member for member in members if member not in packages]
        if unknown:
            raise ResolutionError(f"workspace members missing from package list: {', '.join(unknown)}")

        edges: Dict[str, List[ResolvedEdge]] = {}
        resolve = metadata.get("resolve") or {}
        for node in resolve.get("nodes") or []:
            edges[node["id"]] = _edges_for_node(node, packages)
    except KeyError as exc:
        raise ResolutionError(f"unexpected `cargo metadata` output: missing {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ResolutionError(f"unexpected `cargo metadata` output: {exc}") from exc

    return ResolvedWorkspace(packages=packages, workspace_members=members, edges=edges)


class CargoMetadataResolver:
    """Resolve a workspace by running ``cargo metadata``."""

    def __init__(self, cargo: str = "cargo", offline: bool = False, locked: bool = False, frozen: bool = False) -> None:
        self.cargo = cargo
        self.offline = offline
        self.locked = locked
        self.frozen = frozen

    @classmethod
    def from_config(cls, config: BomConfig) -> "CargoMetadataResolver":
        return cls(cargo=config.cargo, offline=config.offline, locked=config.locked, frozen=config.frozen)

    def command(self, manifest_path: Path) -> List[str]:
        cmd = [self.cargo, "metadata", "--format-version", "1", "--manifest-path", str(manifest_path)]
        if self.frozen:
            cmd.append("--frozen")
        if self.locked:
            cmd.append("--locked")
        if self.offline:
            cmd.append("--offline")
        return cmd

    def resolve(self, manifest_path: Path) -> ResolvedWorkspace:
        load_manifest(manifest_path)

        cmd = self.command(manifest_path)
        logger.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except FileNotFoundError as exc:
            raise ResolutionError(f"could not execute `{self.cargo}`: {exc}") from exc

        # cargo writes UTF-8 regardless of the locale
        if proc.returncode != 0:
            stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ResolutionError(stderr or f"`cargo metadata` exited with status {proc.returncode}")

        try:
            metadata = json.loads((proc.stdout or b"").decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ResolutionError(f"`cargo metadata` output is not valid UTF-8: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ResolutionError(f"could not parse `cargo metadata` output: {exc}") from exc

        workspace = parse_metadata(metadata)
        logger.info(
            "resolved %d packages for %d workspace member(s)",
            len(workspace.packages),
            len(workspace.workspace_members),
        )
        return workspace
