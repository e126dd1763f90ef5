"""
Look&Feel Installer
Fetches the look&feel repository, mirrors it into $HOME, then writes
wallpapers and session hooks.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table

from .config import InstallerConfig
from .hooks import write_hooks
from .legacy import has_new_layout, install_legacy, needs_migration, warn_migration
from .log import console, logger
from .mirror import MirrorResult, mirror
from .repo import RepoFetcher
from .utils import Utils
from .wallpapers import download_and_extract_wallpapers


# --- Installer ---
class LookAndFeelInstaller:
    def __init__(
        self,
        config: InstallerConfig,
        fetcher: Optional[RepoFetcher] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.fetcher = fetcher or RepoFetcher(
            config.repo_url, config.branch, config.source_dir, dry_run=config.dry_run
        )
        self.clock = clock
        self.results: List[Tuple[str, MirrorResult]] = []
        self.layout = "unknown"
        self.wallpapers_ok: Optional[bool] = None
        self.hooks: List[Path] = []

    @property
    def source_dir(self) -> Path:
        return self.fetcher.dest_dir

    def step_fetch(self):
        console.rule("[bold blue]Step 1: Fetch look&feel repository")
        self.fetcher.sync()

    def step_install_files(self):
        console.rule("[bold blue]Step 2: Install files")
        cfg = self.config

        if has_new_layout(self.source_dir, cfg.layout):
            self.layout = "new"
            console.print("[cyan]Using new repository structure[/cyan]")
            for spec in cfg.layout:
                self.results.append(
                    (
                        spec.source,
                        mirror(
                            self.source_dir / spec.source,
                            spec.dest,
                            spec.mode,
                            protected_names=cfg.protected_files,
                            home=cfg.home,
                            dry_run=cfg.dry_run,
                            clock=self.clock,
                        ),
                    )
                )
        else:
            self.layout = "legacy"
            if needs_migration(self.source_dir, cfg.legacy.scripts_dir):
                warn_migration()
            self.results.extend(install_legacy(cfg, self.source_dir, clock=self.clock))

    def step_wallpapers(self):
        if not self.config.wallpapers:
            logger.info("Wallpapers disabled, skipping.")
            return
        console.rule("[bold blue]Step 3: Wallpapers")
        self.wallpapers_ok = download_and_extract_wallpapers(
            self.config.wallpaper_url,
            self.config.wallpaper_dir,
            self.config.cache_base,
            dry_run=self.config.dry_run,
        )

    def step_hooks(self):
        console.rule("[bold blue]Step 4: Session hooks")
        self.hooks = write_hooks(self.config.hooks_dir, self.config.hooks, dry_run=self.config.dry_run)
        console.print(f"[green]Created {len(self.hooks)} hooks in {self.config.hooks_dir}[/green]")

    def check_path(self) -> bool:
        local_bin = self.config.local_bin
        if Utils.on_path(str(local_bin)):
            return True
        logger.warning(f"{local_bin} is not in your PATH.")
        logger.warning("Add this line to your shell profile (e.g., ~/.bashrc or ~/.zshrc):")
        console.print('  export PATH="$HOME/.local/bin:$PATH"')
        return False

    def summary_table(self) -> Table:
        table = Table(title="Mirrored files")
        table.add_column("Source")
        table.add_column("Destination")
        table.add_column("Installed", justify="right")
        table.add_column("Backed up", justify="right")
        table.add_column("Protected", justify="right")
        table.add_column("Missing", justify="right")
        for label, res in self.results:
            if res.skipped:
                table.add_row(label, str(res.dest_root), f"[dim]{res.reason}[/dim]", "", "", "")
                continue
            installed = len(res.planned) if self.config.dry_run else len(res.installed)
            table.add_row(
                label,
                str(res.dest_root),
                str(installed),
                str(len(res.backups)),
                str(len(res.protected)),
                str(len(res.missing)),
            )
        return table

    def show_summary(self):
        cfg = self.config
        console.print(self.summary_table())
        protected = ", ".join(sorted(cfg.protected_files)) or "none"
        lines = [
            f"Repository structure: {'NEW' if self.layout == 'new' else 'LEGACY (consider migrating)'}",
            f"Repository: {cfg.repo_url} (branch: {cfg.branch})",
            f"Local cache: {self.source_dir}",
            f"Session hooks: {cfg.hooks_dir}",
            f"Protected files ({protected}) were not modified",
        ]
        if cfg.wallpapers:
            lines.append(f"Wallpapers: {cfg.wallpaper_dir}")
        if cfg.dry_run:
            lines.append("Dry-run: no changes were made")
        console.print(Panel("\n".join(lines), title="Look&feel installation complete", style="bold green"))

    def run(self) -> List[Tuple[str, MirrorResult]]:
        self.step_fetch()
        self.step_install_files()
        self.step_wallpapers()
        self.step_hooks()
        self.check_path()
        self.show_summary()
        return self.results
