"""
Session hooks: small /bin/sh fragments in ~/.config/xinitrc.d that the
session initializer runs in file name order.
"""

from pathlib import Path
from typing import Iterable, List

from .config import HookSpec
from .exceptions import HookError
from .log import logger

HOOK_MODE = 0o755


def render_hook(hook: HookSpec) -> str:
    body = hook.body if hook.body.endswith("\n") else hook.body + "\n"
    return f"#!/bin/sh\n# {hook.description}\n# Created by lookandfeel\n\n{body}"


def write_hooks(hooks_dir: Path, hooks: Iterable[HookSpec], dry_run: bool = False) -> List[Path]:
    """
    Write the autostart fragments sourced by ~/.xinitrc. The session runs
    them in file name order, so the numeric prefix decides startup order.
    """
    written = []
    if not dry_run:
        try:
            hooks_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise HookError(f"Cannot create hooks directory {hooks_dir}: {e}") from e

    for hook in hooks:
        path = hooks_dir / hook.name
        if dry_run:
            logger.info(f"(dry-run) write hook {path}")
        else:
            try:
                path.write_text(render_hook(hook))
                path.chmod(HOOK_MODE)
            except OSError as e:
                raise HookError(f"Cannot write hook {path}: {e}") from e
            logger.info(f"Created hook: {path}")
        written.append(path)
    return written
