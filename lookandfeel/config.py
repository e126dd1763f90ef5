"""
Installer configuration: packaged YAML defaults, an optional user file
and command-line overrides, resolved into one frozen InstallerConfig.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

from .exceptions import ConfigError
from .log import logger

# --- Global Constants ---
CONFIG_DIR = Path(__file__).parent.resolve() / "configs"
DEFAULT_CONFIG = CONFIG_DIR / "lookandfeel.yaml"


# --- Config Models ---
@dataclass(frozen=True)
class TreeSpec:
    """One repository subtree and where it is mirrored to."""

    source: str
    dest: Path
    mode: int


@dataclass(frozen=True)
class HookSpec:
    name: str
    description: str
    body: str


@dataclass(frozen=True)
class LegacySpec:
    dotfiles: Tuple[str, ...] = ()
    scripts_dir: str = "scripts"
    files: Tuple[Tuple[str, Path], ...] = ()
    config_dirs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InstallerConfig:
    repo_url: str
    branch: str
    home: Path
    cache_base: Path
    hooks_dir: Path
    wallpaper_url: str
    wallpaper_dir: Path
    protected_files: FrozenSet[str] = frozenset()
    layout: Tuple[TreeSpec, ...] = ()
    hooks: Tuple[HookSpec, ...] = ()
    legacy: LegacySpec = field(default_factory=LegacySpec)
    dry_run: bool = False
    wallpapers: bool = True

    @property
    def source_dir(self) -> Path:
        """Checkout location of the configured branch."""
        return self.cache_base / self.branch

    @property
    def local_bin(self) -> Path:
        return self.home / ".local" / "bin"


# --- Loading ---
class ConfigLoader:
    """Loads YAML configurations."""

    def __init__(self, config_path: Path = DEFAULT_CONFIG):
        self.config_path = Path(config_path)
        self.data: Dict[str, Any] = {}
        self.load()

    def load(self):
        if not self.config_path.exists():
            raise ConfigError(f"Config file not found: {self.config_path}")
        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping at the top level")
        self.data = data

    def merge(self, other: "ConfigLoader") -> "ConfigLoader":
        logger.info(f"Merging configuration from {other.config_path}")
        self.data.update(other.data)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def require(self, key: str) -> Any:
        if key not in self.data or self.data[key] in (None, ""):
            raise ConfigError(f"Missing required setting '{key}' in {self.config_path}")
        return self.data[key]


def expand_home(value: str, home: Path) -> Path:
    """Expand a leading ``~`` against ``home`` instead of the real $HOME."""
    value = str(value)
    if value == "~":
        return home
    if value.startswith("~/"):
        return home / value[2:]
    return Path(value)


def parse_mode(value: Any, where: str) -> int:
    if not isinstance(value, str):
        raise ConfigError(f"{where}: mode must be a quoted octal string such as \"644\", got {value!r}")
    try:
        return int(value, 8)
    except ValueError as e:
        raise ConfigError(f"{where}: invalid octal mode {value!r}") from e


def _layout(entries: Any, home: Path) -> Tuple[TreeSpec, ...]:
    if not isinstance(entries, list):
        raise ConfigError("'layout' must be a list")
    layout = []
    for i, item in enumerate(entries):
        if not isinstance(item, dict) or not {"source", "dest", "mode"} <= set(item):
            raise ConfigError(f"layout[{i}] needs 'source', 'dest' and 'mode'")
        source = str(item["source"]).strip()
        parts = Path(source).parts
        if not parts or source.startswith("/") or ".." in parts:
            raise ConfigError(f"layout[{i}]: source must be a subdirectory of the repository, got {source!r}")
        layout.append(
            TreeSpec(
                source=source,
                dest=expand_home(item["dest"], home),
                mode=parse_mode(item["mode"], f"layout[{i}]"),
            )
        )
    return tuple(layout)


def _hooks(entries: Any) -> Tuple[HookSpec, ...]:
    if not isinstance(entries, list):
        raise ConfigError("'hooks' must be a list")
    hooks = []
    for i, item in enumerate(entries):
        if not isinstance(item, dict) or "name" not in item or "body" not in item:
            raise ConfigError(f"hooks[{i}] needs 'name' and 'body'")
        name = str(item["name"])
        if "/" in name or name in (".", ".."):
            raise ConfigError(f"hooks[{i}]: invalid hook file name {name!r}")
        hooks.append(HookSpec(name=name, description=str(item.get("description", name)), body=str(item["body"])))
    return tuple(hooks)


def _legacy(section: Any, home: Path) -> LegacySpec:
    if not section:
        return LegacySpec()
    if not isinstance(section, dict):
        raise ConfigError("'legacy' must be a mapping")
    files = section.get("files") or {}
    if not isinstance(files, dict):
        raise ConfigError("'legacy.files' must map file names to destinations")
    return LegacySpec(
        dotfiles=tuple(str(d) for d in section.get("dotfiles") or ()),
        scripts_dir=str(section.get("scripts_dir", "scripts")),
        files=tuple((str(src), expand_home(dst, home)) for src, dst in files.items()),
        config_dirs=tuple(str(d) for d in section.get("config_dirs") or ()),
    )


def build_config(
    config_path: Optional[Path] = None,
    repo_url: Optional[str] = None,
    branch: Optional[str] = None,
    dry_run: bool = False,
    home: Optional[Path] = None,
    wallpapers: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> InstallerConfig:
    """
    Resolve the installer configuration: packaged defaults, then the user's
    YAML file, then command-line overrides.
    """
    env = os.environ if environ is None else environ
    loader = ConfigLoader(DEFAULT_CONFIG)
    if config_path is not None:
        loader.merge(ConfigLoader(config_path))

    home = Path(home).expanduser() if home is not None else Path.home()
    cache_root = Path(env["XDG_CACHE_HOME"]) if env.get("XDG_CACHE_HOME") else home / ".cache"

    branch = branch or str(loader.require("branch"))
    if branch.startswith("/") or any(part in ("", ".", "..") for part in branch.split("/")):
        # branch doubles as the cache directory name
        raise ConfigError(f"Unsupported branch name: {branch!r}")

    return InstallerConfig(
        repo_url=repo_url or str(loader.require("repo_url")),
        branch=branch,
        home=home,
        cache_base=cache_root / "alpi" / "lookandfeel",
        hooks_dir=expand_home(loader.get("hooks_dir", "~/.config/xinitrc.d"), home),
        wallpaper_url=str(loader.get("wallpaper_url", "")),
        wallpaper_dir=expand_home(loader.get("wallpaper_dir", "~/Pictures/Wallpapers"), home),
        protected_files=frozenset(str(p) for p in loader.get("protected_files") or ()),
        layout=_layout(loader.get("layout", []), home),
        hooks=_hooks(loader.get("hooks", [])),
        legacy=_legacy(loader.get("legacy"), home),
        dry_run=dry_run,
        wallpapers=wallpapers and bool(loader.get("wallpaper_url")),
    )
