"""
Tree mirroring with backups.

Every regular file under a source root is installed at the same relative
path under a destination root with a fixed permission mode. A file that
already exists at the destination is first copied to
``<path>.bak.<YYYYMMDD_HHMMSS>``. Files another installer owns (the
"protected" names) are left alone once they exist in the home directory.
"""

import os
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional

from .exceptions import MirrorError
from .log import logger

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

ProtectionPredicate = Callable[[Path, Path], bool]


class Outcome(Enum):
    INSTALLED = "installed"
    PLANNED = "planned"
    SKIPPED_MISSING = "skipped-missing-source"
    SKIPPED_PROTECTED = "skipped-protected"


@dataclass(frozen=True)
class FileEntry:
    path: Path
    relative: Path


@dataclass(frozen=True)
class FileResult:
    entry: FileEntry
    destination: Path
    outcome: Outcome
    backup: Optional[Path] = None


@dataclass
class MirrorResult:
    source_root: Path
    dest_root: Path
    skipped: bool = False
    reason: str = ""
    files: List[FileResult] = field(default_factory=list)

    def _with(self, outcome: Outcome) -> List[FileResult]:
        return [f for f in self.files if f.outcome is outcome]

    @property
    def installed(self) -> List[FileResult]:
        return self._with(Outcome.INSTALLED)

    @property
    def planned(self) -> List[FileResult]:
        return self._with(Outcome.PLANNED)

    @property
    def protected(self) -> List[FileResult]:
        return self._with(Outcome.SKIPPED_PROTECTED)

    @property
    def missing(self) -> List[FileResult]:
        return self._with(Outcome.SKIPPED_MISSING)

    @property
    def backups(self) -> List[Path]:
        return [f.backup for f in self.files if f.backup is not None]


def home_protection(names: Iterable[str], home: Optional[Path] = None) -> ProtectionPredicate:
    """
    Build the default protection rule: a file is protected when the
    destination root is ``home`` and its base name is one of ``names``.
    """
    protected = frozenset(names)
    home_dir = Path(home if home is not None else Path.home()).expanduser().resolve()

    def is_protected(dest_root: Path, relative: Path) -> bool:
        if not protected:
            return False
        if Path(dest_root).expanduser().resolve() != home_dir:
            return False
        return Path(relative).name in protected

    return is_protected


@dataclass(frozen=True)
class MirrorJob:
    source_root: Path
    dest_root: Path
    file_mode: int
    protected_names: FrozenSet[str] = frozenset()
    home: Optional[Path] = None
    is_protected: Optional[ProtectionPredicate] = None
    dry_run: bool = False

    def protection(self) -> ProtectionPredicate:
        if self.is_protected is not None:
            return self.is_protected
        return home_protection(self.protected_names, self.home)


def iter_files(source_root: Path) -> Iterator[FileEntry]:
    """Yield every regular file below ``source_root``."""
    for dirpath, _dirnames, filenames in os.walk(source_root):
        for name in filenames:
            path = Path(dirpath) / name
            if path.is_file() and not path.is_symlink():
                yield FileEntry(path=path, relative=path.relative_to(source_root))


def backup_path(dest: Path, now: Optional[datetime] = None) -> Path:
    """Pick ``<dest>.bak.<timestamp>``, adding ``.N`` if that name is taken."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = dest.with_name(f"{dest.name}.bak.{stamp}")
    counter = 1
    while os.path.lexists(candidate):
        candidate = dest.with_name(f"{dest.name}.bak.{stamp}.{counter}")
        counter += 1
    return candidate


class TreeInstaller:
    """Runs one MirrorJob."""

    def __init__(self, job: MirrorJob, clock: Callable[[], datetime] = datetime.now):
        self.job = job
        self.clock = clock
        self._is_protected = job.protection()

    def run(self) -> MirrorResult:
        job = self.job
        source_root = Path(job.source_root)
        dest_root = Path(job.dest_root)
        result = MirrorResult(source_root=source_root, dest_root=dest_root)

        if not source_root.is_dir():
            logger.info(f"No directory: {source_root} (skipping).")
            result.skipped = True
            result.reason = "no such directory"
            return result

        logger.info(f"Mirroring {source_root} -> {dest_root}")

        if not job.dry_run:
            try:
                dest_root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MirrorError(f"Cannot create destination {dest_root}: {e}") from e

        for entry in iter_files(source_root):
            result.files.append(self.install_file(entry, dest_root / entry.relative))

        return result

    def install_file(self, entry: FileEntry, dest: Path) -> FileResult:
        job = self.job

        if self._is_protected(Path(job.dest_root), entry.relative) and os.path.lexists(dest):
            logger.warning(
                f"Protected file exists: {entry.relative.name} (managed by other install scripts)"
            )
            logger.warning(f"Skipping to avoid conflicts. To merge manually: diff {dest} {entry.path}")
            return FileResult(entry, dest, Outcome.SKIPPED_PROTECTED)

        if job.dry_run:
            if not entry.path.is_file():
                logger.warning(f"Missing source (skipping): {entry.path}")
                return FileResult(entry, dest, Outcome.SKIPPED_MISSING)
            logger.info(f"(dry-run) install {entry.path} -> {dest} (mode {job.file_mode:o})")
            return FileResult(entry, dest, Outcome.PLANNED)

        # the source is opened before the destination is touched, so a
        # vanished source leaves the destination as it was
        try:
            fsrc = open(entry.path, "rb")
        except FileNotFoundError:
            logger.warning(f"Missing source (skipping): {entry.path}")
            return FileResult(entry, dest, Outcome.SKIPPED_MISSING)
        except OSError as e:
            raise MirrorError(f"Failed to read {entry.path}: {e}") from e

        backup = None
        with fsrc:
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                if os.path.lexists(dest):
                    backup = backup_path(dest, self.clock())
                    shutil.copy2(dest, backup, follow_symlinks=False)
                    logger.info(f"Backup: {dest} -> {backup}")
                    if dest.is_symlink():
                        # replace the link itself, never write through it
                        dest.unlink()
                with open(dest, "wb") as fdst:
                    shutil.copyfileobj(fsrc, fdst)
                os.chmod(dest, job.file_mode)
            except OSError as e:
                raise MirrorError(f"Failed to install {entry.path} -> {dest}: {e}") from e

        logger.info(f"Installed: {entry.path} -> {dest} (mode {job.file_mode:o})")
        return FileResult(entry, dest, Outcome.INSTALLED, backup)


def mirror(
    source_root: Path,
    dest_root: Path,
    file_mode: int,
    protected_names: Iterable[str] = (),
    home: Optional[Path] = None,
    is_protected: Optional[ProtectionPredicate] = None,
    dry_run: bool = False,
    clock: Callable[[], datetime] = datetime.now,
) -> MirrorResult:
    job = MirrorJob(
        source_root=Path(source_root),
        dest_root=Path(dest_root),
        file_mode=file_mode,
        protected_names=frozenset(protected_names),
        home=home,
        is_protected=is_protected,
        dry_run=dry_run,
    )
    return TreeInstaller(job, clock=clock).run()
