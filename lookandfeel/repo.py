import subprocess
from pathlib import Path

from .exceptions import FetchError
from .log import console, logger
from .utils import Utils


class RepoFetcher:
    """Keeps a shallow checkout of one branch of the look&feel repository."""

    def __init__(self, repo_url: str, branch: str, dest_dir: Path, dry_run: bool = False):
        self.repo_url = repo_url
        self.branch = branch
        self.dest_dir = Path(dest_dir)
        self.dry_run = dry_run

    def is_cloned(self) -> bool:
        return (self.dest_dir / ".git").is_dir()

    def commands(self):
        d = str(self.dest_dir)
        if self.is_cloned():
            return [
                ["git", "-C", d, "fetch", "--all", "--prune"],
                ["git", "-C", d, "checkout", self.branch],
                ["git", "-C", d, "reset", "--hard", f"origin/{self.branch}"],
            ]
        return [["git", "clone", "--depth", "1", "--branch", self.branch, self.repo_url, d]]

    def sync(self) -> Path:
        if self.is_cloned():
            console.print(f"[cyan]Updating look&feel repo at: {self.dest_dir}[/cyan]")
        else:
            console.print(f"[cyan]Cloning look&feel repo -> {self.dest_dir}[/cyan]")

        for cmd in self.commands():
            if self.dry_run:
                logger.info(f"(dry-run) {' '.join(cmd)}")
                continue
            if cmd[1] == "clone":
                try:
                    self.dest_dir.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise FetchError(f"Cannot create cache directory {self.dest_dir.parent}: {e}") from e
            try:
                Utils.run_command(cmd)
            except FileNotFoundError as e:
                raise FetchError("git is not installed") from e
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
                raise FetchError(f"git failed for {self.repo_url} ({self.branch}): {e}") from e

        logger.info(f"Using source tree: {self.dest_dir} (branch={self.branch})")
        return self.dest_dir
