"""
Support for the old flat repository layout, where dotfiles and a handful of
config files sit in the repository root and scripts live in ``scripts/``.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

from .config import InstallerConfig, TreeSpec
from .log import logger
from .mirror import FileEntry, MirrorJob, MirrorResult, TreeInstaller, mirror

FILE_MODE = 0o644
SCRIPT_MODE = 0o755


def has_new_layout(source_dir: Path, layout: Iterable[TreeSpec]) -> bool:
    """True when any top-level directory of the structured layout exists."""
    tops = {Path(spec.source).parts[0] for spec in layout if Path(spec.source).parts}
    return any((source_dir / top).is_dir() for top in tops)


def needs_migration(source_dir: Path, scripts_dir: str = "scripts") -> bool:
    if (source_dir / ".bashrc").is_file() or (source_dir / "picom.conf").is_file():
        return True
    return (source_dir / scripts_dir).is_dir() and not (source_dir / "local" / "bin").is_dir()


def warn_migration():
    for line in (
        "OLD REPOSITORY STRUCTURE DETECTED",
        "Your repo uses the old structure with files in the root.",
        "For best results, restructure your repo:",
        "  1. Create these directories: dotfiles/, config/, local/bin/, local/share/",
        "  2. Move .bashrc, .bash_aliases etc. -> dotfiles/",
        "  3. Move picom.conf, alacritty.toml etc. -> config/picom/, config/alacritty/",
        "  4. Move scripts/*.sh -> local/bin/",
        "  5. Move themes -> local/share/rofi/themes/",
        "This installer still handles the old structure (legacy mode).",
    ):
        logger.warning(line)


def _install_files(
    job: MirrorJob,
    pairs: Iterable[Tuple[Path, Path]],
    clock: Callable[[], datetime],
) -> MirrorResult:
    installer = TreeInstaller(job, clock=clock)
    result = MirrorResult(source_root=job.source_root, dest_root=job.dest_root)
    for src, dest in pairs:
        entry = FileEntry(path=src, relative=Path(src.name))
        result.files.append(installer.install_file(entry, dest))
    return result


def install_legacy(
    config: InstallerConfig,
    source_dir: Path,
    clock: Callable[[], datetime] = datetime.now,
) -> List[Tuple[str, MirrorResult]]:
    logger.info("Using legacy installation mode (old repo structure)")
    legacy = config.legacy
    home = config.home
    results = []

    dotfiles = [
        (source_dir / name, home / name)
        for name in legacy.dotfiles
        if (source_dir / name).is_file()
    ]
    job = MirrorJob(
        source_root=source_dir,
        dest_root=home,
        file_mode=FILE_MODE,
        protected_names=config.protected_files,
        home=home,
        dry_run=config.dry_run,
    )
    results.append(("legacy dotfiles", _install_files(job, dotfiles, clock)))

    scripts_dir = source_dir / legacy.scripts_dir
    if scripts_dir.is_dir():
        logger.info(f"Installing scripts from legacy {legacy.scripts_dir}/ directory")
        scripts = [(s, config.local_bin / s.name) for s in sorted(scripts_dir.glob("*.sh")) if s.is_file()]
        job = MirrorJob(scripts_dir, config.local_bin, SCRIPT_MODE, dry_run=config.dry_run)
        results.append(("legacy scripts", _install_files(job, scripts, clock)))

    for name, dest in legacy.files:
        src = source_dir / name
        if not src.is_file():
            continue
        job = MirrorJob(source_dir, dest.parent, FILE_MODE, dry_run=config.dry_run)
        results.append((name, _install_files(job, [(src, dest)], clock)))

    for name in legacy.config_dirs:
        tree = source_dir / name
        if tree.is_dir():
            results.append(
                (f"{name}/", mirror(tree, home / ".config", FILE_MODE, dry_run=config.dry_run, clock=clock))
            )

    return results
