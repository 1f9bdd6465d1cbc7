"""Configuration loading for dotpatch (.dotpatch.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".dotpatch.yml"
DEFAULT_DOTFILES_HOME = "~/dotfiles/home"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class WeztermConfig:
    """Window layout and font knobs for the WezTerm recipe."""

    font_size: float = 16.0
    width_ratio: float = 0.6666667
    height_ratio: float = 0.5
    y_offset_ratio: float = 0.08
    primary_font: str = "MesloLGS NF"


@dataclass
class BlockConfig:
    """A user-defined managed block; ``lines`` excludes the marker line."""

    target: str
    marker: str
    lines: List[str] = field(default_factory=list)

    def block_lines(self) -> List[str]:
        return [self.marker, *self.lines]


@dataclass
class DotpatchConfig:
    """Represents the settings defined in .dotpatch.yml."""

    root: Path
    dotfiles_home: Path = field(default_factory=lambda: Path(DEFAULT_DOTFILES_HOME).expanduser())
    recipes: Optional[List[str]] = None
    wezterm: WeztermConfig = field(default_factory=WeztermConfig)
    blocks: List[BlockConfig] = field(default_factory=list)


def load_config(config_path: Path, *, env: Mapping[str, str] | None = None) -> DotpatchConfig:
    """Load configuration from disk, then apply environment overrides."""
    environ = os.environ if env is None else env
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DotpatchConfig(root=root)

    home = _as_str(data.get("dotfiles_home"))
    if home:
        config.dotfiles_home = _resolve_dir(root, home)

    if "recipes" in data and data["recipes"] is not None:
        config.recipes = _as_str_list(data.get("recipes"))

    wezterm_data = _as_dict(data.get("wezterm"))
    if wezterm_data:
        config.wezterm = WeztermConfig(
            font_size=_as_float(wezterm_data.get("font_size"), config.wezterm.font_size),
            width_ratio=_as_float(wezterm_data.get("width_ratio"), config.wezterm.width_ratio),
            height_ratio=_as_float(wezterm_data.get("height_ratio"), config.wezterm.height_ratio),
            y_offset_ratio=_as_float(wezterm_data.get("y_offset_ratio"), config.wezterm.y_offset_ratio),
            primary_font=_as_str(wezterm_data.get("primary_font")) or config.wezterm.primary_font,
        )

    config.blocks = [_parse_block(entry, index) for index, entry in enumerate(_as_list(data.get("blocks")))]

    _apply_env_overrides(config, environ)
    return config


def _apply_env_overrides(config: DotpatchConfig, env: Mapping[str, str]) -> None:
    home_dir = env.get("DOTFILES_HOME_DIR")
    dotfiles_dir = env.get("DOTFILES_DIR")
    if home_dir:
        config.dotfiles_home = Path(home_dir).expanduser()
    elif dotfiles_dir:
        config.dotfiles_home = Path(dotfiles_dir).expanduser() / "home"

    overrides = {
        "WEZTERM_FONT_SIZE": "font_size",
        "WEZTERM_WIDTH_RATIO": "width_ratio",
        "WEZTERM_HEIGHT_RATIO": "height_ratio",
        "WEZTERM_Y_OFFSET_RATIO": "y_offset_ratio",
    }
    for variable, attribute in overrides.items():
        raw = env.get(variable)
        if raw is None or not raw.strip():
            continue
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigError(f"{variable} must be a number, got {raw!r}") from exc
        setattr(config.wezterm, attribute, value)


def _parse_block(entry: Any, index: int) -> BlockConfig:
    data = _as_dict(entry)
    target = _as_str(data.get("target"))
    marker = _as_str(data.get("marker"))
    if not target or not marker:
        raise ConfigError(f"blocks[{index}] requires both 'target' and 'marker'")
    raw_lines = data.get("lines")
    if isinstance(raw_lines, str):
        lines = raw_lines.rstrip("\n").splitlines()
    else:
        lines = _as_str_list(raw_lines)
    if lines and lines[0] == marker:
        lines = lines[1:]
    return BlockConfig(target=target, marker=marker, lines=lines)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_dir(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (root / path)


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ConfigError(f"Expected a number, got {value!r}") from exc
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "BlockConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DotpatchConfig",
    "WeztermConfig",
    "load_config",
]
