from pathlib import Path

import pytest

from lookandfeel.config import ConfigLoader, DEFAULT_CONFIG, build_config, expand_home, parse_mode
from lookandfeel.exceptions import ConfigError


def test_defaults(config, home, tmp_path):
    assert config.repo_url == "https://github.com/nirucon/suckless_lookandfeel"
    assert config.branch == "main"
    assert config.protected_files == frozenset({".xinitrc", ".bash_profile"})
    assert config.cache_base == tmp_path / "cache" / "alpi" / "lookandfeel"
    assert config.source_dir == config.cache_base / "main"
    assert config.hooks_dir == home / ".config" / "xinitrc.d"
    assert config.wallpaper_dir == home / "Pictures" / "Wallpapers"
    assert config.local_bin == home / ".local" / "bin"


def test_default_layout(config, home):
    layout = [(spec.source, spec.dest, spec.mode) for spec in config.layout]
    assert layout == [
        ("dotfiles", home, 0o644),
        ("config", home / ".config", 0o644),
        ("local/bin", home / ".local" / "bin", 0o755),
        ("local/share", home / ".local" / "share", 0o644),
    ]


def test_default_hooks_and_legacy(config, home):
    assert [h.name for h in config.hooks] == [
        "10-compositor.sh",
        "20-wallpaper.sh",
        "25-notifications.sh",
        "50-nextcloud.sh",
        "60-polkit.sh",
    ]
    assert ".bashrc" in config.legacy.dotfiles
    assert dict(config.legacy.files)["picom.conf"] == home / ".config" / "picom" / "picom.conf"
    assert config.legacy.config_dirs == ("config", ".config")


def test_cli_values_override(home):
    cfg = build_config(
        repo_url="https://example.com/me/looks",
        branch="dev",
        dry_run=True,
        home=home,
        environ={},
    )
    assert cfg.repo_url == "https://example.com/me/looks"
    assert cfg.branch == "dev"
    assert cfg.dry_run
    assert cfg.cache_base == home / ".cache" / "alpi" / "lookandfeel"
    assert cfg.source_dir == home / ".cache" / "alpi" / "lookandfeel" / "dev"


def test_user_file_merged_over_defaults(tmp_path, home):
    user = tmp_path / "mine.yaml"
    user.write_text("branch: dev\nprotected_files: [.zprofile]\nwallpaper_url: ''\n")

    cfg = build_config(config_path=user, home=home, environ={})

    assert cfg.branch == "dev"
    assert cfg.protected_files == frozenset({".zprofile"})
    assert not cfg.wallpapers
    assert cfg.repo_url == "https://github.com/nirucon/suckless_lookandfeel"


def test_config_is_immutable(config):
    with pytest.raises(AttributeError):
        config.branch = "other"


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        ConfigLoader(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("layout: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigLoader(bad)


def test_top_level_must_be_mapping(tmp_path):
    bad = tmp_path / "list.yaml"
    bad.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        ConfigLoader(bad)


def test_unquoted_mode_rejected(tmp_path, home):
    user = tmp_path / "mode.yaml"
    user.write_text("layout:\n  - {source: dotfiles, dest: '~', mode: 644}\n")
    with pytest.raises(ConfigError, match="octal"):
        build_config(config_path=user, home=home, environ={})


@pytest.mark.parametrize("branch", ["..", "/abs", "a//b", "a/../b"])
def test_unsafe_branch_rejected(home, branch):
    with pytest.raises(ConfigError):
        build_config(branch=branch, home=home, environ={})


def test_expand_home(home):
    assert expand_home("~", home) == home
    assert expand_home("~/.config/x", home) == home / ".config" / "x"
    assert expand_home("/etc/x", home) == Path("/etc/x")


def test_parse_mode():
    assert parse_mode("755", "t") == 0o755
    with pytest.raises(ConfigError):
        parse_mode("999", "t")


def test_packaged_defaults_exist():
    assert DEFAULT_CONFIG.is_file()
    assert ConfigLoader().get("branch") == "main"


@pytest.mark.parametrize("source", [".", "", "/etc", "../outside"])
def test_layout_source_must_be_subdirectory(tmp_path, home, source):
    user = tmp_path / "layout.yaml"
    user.write_text(f"layout:\n  - {{source: '{source}', dest: '~', mode: '644'}}\n")
    with pytest.raises(ConfigError, match="subdirectory"):
        build_config(config_path=user, home=home, environ={})
