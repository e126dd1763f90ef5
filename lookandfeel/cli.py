"""
Command line entry point: parse flags, set up logging, run the installer.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.panel import Panel

from . import __version__
from .config import build_config
from .exceptions import LookAndFeelError
from .installer import LookAndFeelInstaller
from .log import LOG_FILE, console, logger, setup_logging


# --- Argument Parsing ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lookandfeel",
        description="Install configs, themes, scripts, session hooks and wallpapers from a look&feel repository.",
        epilog="Example: lookandfeel --branch dev --dry-run",
    )
    parser.add_argument("--repo", metavar="URL", help="Git repository URL")
    parser.add_argument("--branch", metavar="NAME", help="Branch to checkout")
    parser.add_argument("--config", metavar="FILE", type=Path, help="YAML file overriding the packaged defaults")
    parser.add_argument("--home", metavar="DIR", type=Path, help="Install into DIR instead of $HOME")
    parser.add_argument("--dry-run", action="store_true", help="Preview actions without making changes")
    parser.add_argument("--no-wallpapers", action="store_true", help="Skip the wallpaper download")
    parser.add_argument("--log-file", metavar="FILE", type=Path, default=LOG_FILE, help="Append the log to FILE")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# --- Main ---
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_file, verbose=args.verbose)
    except OSError as e:
        console.print(Panel(f"Cannot open log file {args.log_file}: {e}", style="bold red"))
        return 1

    try:
        config = build_config(
            config_path=args.config,
            repo_url=args.repo,
            branch=args.branch,
            dry_run=args.dry_run,
            home=args.home,
            wallpapers=not args.no_wallpapers,
        )
        LookAndFeelInstaller(config).run()
    except LookAndFeelError as e:
        logger.error(f"Installation aborted: {e}")
        console.print(Panel(f"Critical Error: {e}", style="bold red"))
        return 1
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 1
    except Exception as e:
        logger.exception("Installation crashed")
        console.print(Panel(f"Critical Error: {e}", style="bold red"))
        return 1
    return 0


def run():
    sys.exit(main())
