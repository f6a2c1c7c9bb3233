from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Set

from .config import EnumerationMode
from .types import DependencyKind, Package, ResolvedWorkspace


def _direct_normal_dependencies(workspace: ResolvedWorkspace) -> Set[str]:
    found: set[str] = set()
    for member_id in workspace.workspace_members:
        for edge in workspace.edges_from(member_id):
            if DependencyKind.NORMAL in edge.kinds:
                found.add(edge.target)
    return found


def _reachable(workspace: ResolvedWorkspace) -> Set[str]:
    """Every package id reachable from a workspace member over any edge kind."""

    seen: set[str] = set(workspace.workspace_members)
    queue = deque(workspace.workspace_members)
    while queue:
        current = queue.popleft()
        for edge in workspace.edges_from(current):
            if edge.target not in seen:
                seen.add(edge.target)
                queue.append(edge.target)
    if not workspace.edges:
        # Without a resolve graph every listed package counts as reached.
        seen.update(workspace.packages)
    return seen


def _unique_by_key(packages: Iterable[Package]) -> List[Package]:
    by_key: Dict[tuple[str, str], Package] = {}
    for package in sorted(packages, key=lambda p: (p.name, p.version, p.id)):
        by_key.setdefault(package.key, package)
    return list(by_key.values())


def enumerate_dependencies(
    workspace: ResolvedWorkspace, mode: EnumerationMode = EnumerationMode.TOP_LEVEL
) -> List[Package]:
    """Return the third-party packages to report on, sorted by (name, version).

    ``TOP_LEVEL`` keeps packages that some workspace member depends on through a
    normal edge; build-only and dev-only dependencies are left out. ``ALL``
    keeps the transitive closure. Workspace members never appear in either mode.
    """

    if mode is EnumerationMode.ALL:
        selected = _reachable(workspace)
    else:
        selected = _direct_normal_dependencies(workspace)

    members = set(workspace.workspace_members)
    packages = [
        workspace.packages[package_id]
        for package_id in selected
        if package_id not in members and package_id in workspace.packages
    ]
    return _unique_by_key(packages)
