"""Tests for dotpatch.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from dotpatch.config import BlockConfig, ConfigError, DotpatchConfig, WeztermConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={})

    assert isinstance(config, DotpatchConfig)
    assert config.root == tmp_path.resolve()
    assert config.dotfiles_home == Path("~/dotfiles/home").expanduser()
    assert config.recipes is None
    assert config.wezterm == WeztermConfig()
    assert config.blocks == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".dotpatch.yml"
    config_file.write_text(
        """
dotfiles_home: home
recipes: [eza-aliases, direnv-hook]
wezterm:
  font_size: 14
  width_ratio: 0.5
  primary_font: "MesloLGS Nerd Font Mono"
blocks:
  - target: .zshrc
    marker: "# --- work (managed) ---"
    lines:
      - "alias w='cd ~/work'"
  - target: /etc/zshenv
    marker: "# --- env (managed) ---"
    lines: |
      # --- env (managed) ---
      export LANG=en_US.UTF-8
""",
        encoding="utf-8",
    )

    config = load_config(config_file, env={})

    assert config.dotfiles_home == tmp_path.resolve() / "home"
    assert config.recipes == ["eza-aliases", "direnv-hook"]
    assert config.wezterm.font_size == pytest.approx(14.0)
    assert config.wezterm.width_ratio == pytest.approx(0.5)
    assert config.wezterm.height_ratio == pytest.approx(0.5)
    assert config.wezterm.primary_font == "MesloLGS Nerd Font Mono"
    assert config.blocks == [
        BlockConfig(target=".zshrc", marker="# --- work (managed) ---", lines=["alias w='cd ~/work'"]),
        BlockConfig(target="/etc/zshenv", marker="# --- env (managed) ---", lines=["export LANG=en_US.UTF-8"]),
    ]
    assert config.blocks[0].block_lines() == ["# --- work (managed) ---", "alias w='cd ~/work'"]


def test_environment_overrides_file_values(tmp_path: Path) -> None:
    (tmp_path / ".dotpatch.yml").write_text("dotfiles_home: home\nwezterm:\n  font_size: 14\n", encoding="utf-8")

    config = load_config(
        tmp_path,
        env={"DOTFILES_DIR": str(tmp_path / "df"), "WEZTERM_FONT_SIZE": "16.5", "WEZTERM_Y_OFFSET_RATIO": ""},
    )

    assert config.dotfiles_home == tmp_path / "df" / "home"
    assert config.wezterm.font_size == pytest.approx(16.5)
    assert config.wezterm.y_offset_ratio == pytest.approx(0.08)


def test_home_dir_variable_wins_over_dotfiles_dir(tmp_path: Path) -> None:
    config = load_config(tmp_path, env={"DOTFILES_DIR": "/a", "DOTFILES_HOME_DIR": "/b/home"})

    assert config.dotfiles_home == Path("/b/home")


def test_empty_recipe_list_disables_recipes(tmp_path: Path) -> None:
    (tmp_path / ".dotpatch.yml").write_text("recipes: []\n", encoding="utf-8")

    assert load_config(tmp_path, env={}).recipes == []


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "recipes: [unterminated\n",
        "blocks:\n  - target: .zshrc\n",
        "wezterm:\n  font_size: big\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".dotpatch.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, env={})


def test_invalid_env_number_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path, env={"WEZTERM_FONT_SIZE": "large"})
