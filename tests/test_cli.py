import json
import subprocess
from pathlib import Path

from click.testing import CliRunner

from cargo_bom.cli import main


class FakeCompleted:
    def __init__(self, stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


def _fake_cargo(monkeypatch, metadata: dict, calls: list | None = None):
    def fake_run(cmd, **kwargs):
        if calls is not None:
            calls.append(cmd)
        return FakeCompleted(stdout=json.dumps(metadata).encode())

    monkeypatch.setattr(subprocess, "run", fake_run)


def test_bom_prints_table_and_license_dump(monkeypatch, scenario_metadata, tmp_path: Path):
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 0, result.output
    assert "Name     | Version  | Licenses" in result.output
    assert "foo      | 1.2.0    | Apache-2.0, MIT" in result.output
    assert "-----BEGIN foo 1.2.0 LICENSES-----" in result.output
    assert result.output.count("-----NEXT LICENSE-----") == 1
    assert "bar" not in result.output


def test_all_flag_includes_transitive_dependencies(monkeypatch, scenario_metadata, tmp_path: Path):
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--all", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 0, result.output
    assert "-----BEGIN bar 0.1.0 LICENSES-----" in result.output


def test_resolver_flags_are_passed_through(monkeypatch, scenario_metadata, tmp_path: Path):
    calls: list = []
    _fake_cargo(monkeypatch, scenario_metadata, calls)
    monkeypatch.setenv("CARGO", "/usr/local/bin/cargo")
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["bom", "--offline", "--locked", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")],
    )

    assert result.exit_code == 0, result.output
    assert calls[0][0] == "/usr/local/bin/cargo"
    assert "--offline" in calls[0]
    assert "--locked" in calls[0]
    assert "--frozen" not in calls[0]


def test_json_output_to_file(monkeypatch, scenario_metadata, tmp_path: Path):
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()
    destination = tmp_path / "reports" / "bom.json"

    result = runner.invoke(
        main,
        [
            "bom",
            "--format",
            "json",
            "--output",
            str(destination),
            "--manifest-path",
            str(tmp_path / "app" / "Cargo.toml"),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(destination.read_text())
    assert [dep["name"] for dep in payload["dependencies"]] == ["foo"]
    assert [Path(f["path"]).name for f in payload["dependencies"][0]["license_files"]] == [
        "LICENSE-APACHE",
        "LICENSE-MIT",
    ]


def test_format_defaults_from_environment(monkeypatch, scenario_metadata, tmp_path: Path):
    _fake_cargo(monkeypatch, scenario_metadata)
    monkeypatch.setenv("CARGO_BOM_FORMAT", "markdown")
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 0, result.output
    assert "| foo | 1.2.0 | Apache-2.0, MIT |" in result.output


def test_missing_manifest_exits_non_zero(tmp_path: Path):
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "Cargo.toml")])

    assert result.exit_code == 1
    assert "error: could not find `Cargo.toml`" in result.output


def test_cargo_failure_exits_non_zero(monkeypatch, make_crate, tmp_path: Path):
    root = make_crate("app", "0.1.0", root=tmp_path / "app")
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda cmd, **kwargs: FakeCompleted(stderr=b"error: failed to select a version", returncode=101),
    )
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(root / "Cargo.toml")])

    assert result.exit_code == 1
    assert "error: failed to select a version" in result.output


def test_unlistable_package_directory_exits_non_zero(monkeypatch, scenario_metadata, tmp_path: Path):
    foo = next(pkg for pkg in scenario_metadata["packages"] if pkg["name"] == "foo")
    foo["manifest_path"] = str(tmp_path / "gone" / "Cargo.toml")
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 1
    assert "failed to list" in result.output


def test_verbose_logs_to_stderr(monkeypatch, scenario_metadata, tmp_path: Path):
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()

    result = runner.invoke(
        main, ["bom", "-v", "--color", "never", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")]
    )

    assert result.exit_code == 0, result.output
    assert "info: resolved 3 packages for 1 workspace member(s)" in result.output


def test_version_option():
    result = CliRunner().invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "cargo-bom" in result.output


def test_non_ascii_crate_paths_are_reported(monkeypatch, scenario_metadata, make_crate, tmp_path: Path):
    foo_root = make_crate("foo", "1.2.0", {"LICENSE": "Lizenz für foo\n"}, root=tmp_path / "crätes" / "foo")
    foo = next(pkg for pkg in scenario_metadata["packages"] if pkg["name"] == "foo")
    foo["manifest_path"] = str(foo_root / "Cargo.toml")
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda cmd, **kwargs: FakeCompleted(stdout=json.dumps(scenario_metadata, ensure_ascii=False).encode("utf-8")),
    )
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 0, result.output
    assert "Lizenz für foo" in result.output


def test_invalid_metadata_exits_with_error_message(monkeypatch, scenario_metadata, tmp_path: Path):
    scenario_metadata["packages"][0]["dependencies"][0]["kind"] = "unknown-kind"
    _fake_cargo(monkeypatch, scenario_metadata)
    runner = CliRunner()

    result = runner.invoke(main, ["bom", "--manifest-path", str(tmp_path / "app" / "Cargo.toml")])

    assert result.exit_code == 1
    assert "error: unexpected `cargo metadata` output" in result.output
