from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "layergate.toml"

DEFAULT_EXTENSIONS = [".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py"]

# fnmatch semantics: "*" also matches "/".
DEFAULT_EXCLUDE = [
    "node_modules/*",
    "*/node_modules/*",
    "dist/*",
    "*/dist/*",
    "*.d.ts",
    "*.test.*",
    "*.spec.*",
    "__tests__/*",
    "*/__tests__/*",
    "test_*.py",
    "*/test_*.py",
    "*_test.py",
]

DEFAULT_ENTRY_POINTS = [
    "src/index.ts",
    "src/index.tsx",
    "src/index.js",
    "index.ts",
    "index.js",
    "__init__.py",
    "src/__init__.py",
]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ModuleDef(_StrictModel):
    """A registered module: its layer and, optionally, where its sources live."""

    layer: int = Field(ge=0, description="Layer number (0 = most foundational)")
    root: str | None = Field(
        default=None,
        description="Module root relative to the project root "
        "(default: <packages_dir>/<name>)",
    )


class ComplianceConfig(_StrictModel):
    """Configuration for a layergate scan."""

    namespace: str = Field(
        default="@cvplus",
        description="Specifier prefix that marks a reference to a registered module",
    )
    packages_dir: str = Field(
        default="packages",
        description="Directory holding module roots that do not set `root`",
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Source file suffixes to scan",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns (relative to a module root) to include; empty = all",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE),
        description="Glob patterns (relative to a module root) to exclude",
    )
    entry_points: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ENTRY_POINTS),
        description="Candidate public entry files checked for the barrel-export rule",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    modules: dict[str, ModuleDef] = Field(
        default_factory=dict,
        description="Module registry: name -> layer and optional root",
    )

    @field_validator("modules", mode="before")
    @classmethod
    def validate_modules(cls, v: Any) -> Any:
        """Reject registry entries that do not carry a layer.

        Runs in ``mode="before"`` so the error names the offending module
        using the raw TOML value.
        """
        if v is None:
            return {}

        if not isinstance(v, dict):
            msg = "modules must be a mapping of module name -> {layer, root}"
            raise TypeError(msg)

        for name, definition in v.items():
            if not isinstance(name, str) or not name or "/" in name:
                msg = f"Invalid module name {name!r}"
                raise ValueError(msg)
            if isinstance(definition, int) and not isinstance(definition, bool):
                continue
            if not isinstance(definition, dict) or "layer" not in definition:
                msg = f"Module '{name}' must declare a layer"
                raise ValueError(msg)

        return {
            name: {"layer": definition} if isinstance(definition, int) else definition
            for name, definition in v.items()
        }

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        v = v.rstrip("/")
        if not v:
            msg = "namespace must be a non-empty specifier prefix"
            raise ValueError(msg)
        return v

    def registry(self) -> dict[str, int]:
        """Return the module -> layer registry in declaration order."""
        return {name: definition.layer for name, definition in self.modules.items()}

    def module_root(self, root: Path, name: str) -> Path:
        definition = self.modules[name]
        if definition.root is not None:
            return root / definition.root
        return root / self.packages_dir / name


class ConfigError(Exception):
    """Raised when a config file exists but cannot be parsed or validated."""


def load_config(root: Path, config_path: Path | None = None) -> ComplianceConfig:
    """Load configuration from layergate.toml if it exists.

    An explicit ``config_path`` must exist; the default location is optional.
    """
    if config_path is None:
        config_path = Path(root) / CONFIG_FILENAME
        if not config_path.is_file():
            return ComplianceConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ComplianceConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
