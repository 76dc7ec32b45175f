from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import (
    CONFIG_FILENAME,
    DEFAULT_EXCLUDE,
    ComplianceConfig,
    ConfigError,
    load_config,
)


def _write_config(root: Path, text: str) -> Path:
    path = root / CONFIG_FILENAME
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_default_config_returns_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == ComplianceConfig()
    assert config.namespace == "@cvplus"
    assert config.modules == {}
    assert config.exclude == DEFAULT_EXCLUDE


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path, tmp_path / "nope.toml")


def test_modules_keep_declaration_order_and_accept_shorthand(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        'namespace = "@acme/"\n'
        "[modules]\n"
        "auth = 1\n"
        "core = 0\n"
        '[modules.processing]\nlayer = 2\nroot = "libs/processing"\n',
    )

    config = load_config(tmp_path)

    assert config.namespace == "@acme"
    assert config.registry() == {"auth": 1, "core": 0, "processing": 2}
    assert config.module_root(tmp_path, "core") == tmp_path / "packages" / "core"
    assert (
        config.module_root(tmp_path, "processing")
        == tmp_path / "libs" / "processing"
    )


def test_module_without_layer_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, '[modules.core]\nroot = "src/core"\n')

    with pytest.raises(ConfigError, match="must declare a layer"):
        load_config(tmp_path)


def test_negative_layer_is_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[modules.core]\nlayer = -1\n")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "output_dir = 'out'\n")

    with pytest.raises(ConfigError, match="output_dir"):
        load_config(tmp_path)


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[modules\n")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_module_names_cannot_contain_slashes() -> None:
    with pytest.raises(ValueError, match="Invalid module name"):
        ComplianceConfig.model_validate({"modules": {"a/b": 1}})
