import sys
from pathlib import Path

import pytest

# Ensure src package is importable without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


@pytest.fixture
def make_crate(tmp_path: Path):
    """Create a crate directory with a Cargo.toml and optional extra files."""

    def _make(name: str, version: str, files: dict | None = None, root: Path | None = None) -> Path:
        crate_root = root or tmp_path / "registry" / f"{name}-{version}"
        crate_root.mkdir(parents=True, exist_ok=True)
        (crate_root / "Cargo.toml").write_text(f'[package]\nname = "{name}"\nversion = "{version}"\n')
        for filename, text in (files or {}).items():
            (crate_root / filename).write_text(text)
        return crate_root

    return _make


@pytest.fixture
def metadata_package():
    """Build a `cargo metadata` package entry."""

    def _package(
        name: str,
        version: str,
        crate_root: Path,
        license: str | None = None,
        license_file: str | None = None,
        dependencies: list[dict] | None = None,
        source: str | None = REGISTRY,
    ) -> dict:
        package_id = f"{name} {version} ({source or 'path+file://' + str(crate_root)})"
        return {
            "id": package_id,
            "name": name,
            "version": version,
            "license": license,
            "license_file": license_file,
            "source": source,
            "manifest_path": str(crate_root / "Cargo.toml"),
            "dependencies": dependencies or [],
        }

    return _package


@pytest.fixture
def scenario_metadata(make_crate, metadata_package, tmp_path: Path) -> dict:
    """A workspace `app` with a normal dependency on foo and a build dependency on bar."""

    app_root = make_crate("app", "0.1.0", root=tmp_path / "app")
    foo_root = make_crate("foo", "1.2.0", {"LICENSE-MIT": "MIT text\n", "LICENSE-APACHE": "Apache text\n"})
    bar_root = make_crate("bar", "0.1.0", {"LICENSE": "bar license\n"})

    app = metadata_package(
        "app",
        "0.1.0",
        app_root,
        license="MIT",
        source=None,
        dependencies=[
            {"name": "foo", "req": "^1.2", "kind": None},
            {"name": "bar", "req": "^0.1", "kind": "build"},
        ],
    )
    foo = metadata_package("foo", "1.2.0", foo_root, license="MIT OR Apache-2.0")
    bar = metadata_package("bar", "0.1.0", bar_root, license="MIT")

    return {
        "packages": [app, foo, bar],
        "workspace_members": [app["id"]],
        "resolve": {
            "root": app["id"],
            "nodes": [
                {
                    "id": app["id"],
                    "dependencies": [foo["id"], bar["id"]],
                    "deps": [
                        {"name": "foo", "pkg": foo["id"], "dep_kinds": [{"kind": None, "target": None}]},
                        {"name": "bar", "pkg": bar["id"], "dep_kinds": [{"kind": "build", "target": None}]},
                    ],
                },
                {"id": foo["id"], "dependencies": [], "deps": []},
                {"id": bar["id"], "dependencies": [], "deps": []},
            ],
        },
        "workspace_root": str(app_root),
        "version": 1,
    }
