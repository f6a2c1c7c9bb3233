from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class EnumerationMode(str, Enum):
    TOP_LEVEL = "top-level"
    ALL = "all"


class ColorChoice(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    def as_click_color(self) -> Optional[bool]:
        """Map to the tri-state ``color`` flag click contexts understand."""

        if self is ColorChoice.ALWAYS:
            return True
        if self is ColorChoice.NEVER:
            return False
        return None


OUTPUT_FORMATS = ("text", "markdown", "md", "json", "html")


@dataclass(frozen=True)
class BomConfig:
    """Settings for one run, built by the CLI and handed to the pipeline."""

    manifest_path: Path = Path("Cargo.toml")
    mode: EnumerationMode = EnumerationMode.TOP_LEVEL
    verbose: int = 0
    quiet: bool = False
    color: ColorChoice = ColorChoice.AUTO
    frozen: bool = False
    locked: bool = False
    offline: bool = False
    output_format: str = "text"
    output: Optional[Path] = None
    cargo: str = "cargo"


def default_cargo() -> str:
    return os.environ.get("CARGO") or "cargo"


def default_output_format() -> str:
    value = (os.environ.get("CARGO_BOM_FORMAT") or "text").lower()
    return value if value in OUTPUT_FORMATS else "text"


def default_color() -> str:
    value = (os.environ.get("CARGO_TERM_COLOR") or "auto").lower()
    try:
        return ColorChoice(value).value
    except ValueError:
        return ColorChoice.AUTO.value
