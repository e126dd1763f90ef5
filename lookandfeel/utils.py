"""
Helpers for running external tools.
"""

import os
import shutil
import subprocess
from typing import List, Optional

from .log import logger


# --- Utility Classes ---
class Utils:
    @staticmethod
    def run_command(
        cmd: List[str],
        check: bool = True,
        quiet: bool = True,
        timeout: Optional[int] = None,
    ) -> subprocess.CompletedProcess:
        """Execute an external command without a shell."""
        cmd_str = " ".join(cmd)
        logger.info(f"Executing: {cmd_str}")

        try:
            return subprocess.run(
                cmd,
                check=check,
                stdout=subprocess.PIPE if quiet else None,
                stderr=subprocess.PIPE if quiet else None,
                text=True,
                timeout=timeout,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {cmd_str}")
            if quiet and e.stderr:
                logger.error(f"Stderr: {e.stderr.strip()}")
            raise
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out: {cmd_str}")
            if check:
                raise
            return subprocess.CompletedProcess(cmd, 1, "", "Timeout")

    @staticmethod
    def which(*names: str) -> Optional[str]:
        """Return the first of ``names`` found on PATH."""
        for name in names:
            if shutil.which(name):
                return name
        return None

    @staticmethod
    def on_path(directory: str) -> bool:
        entries = os.environ.get("PATH", "").split(os.pathsep)
        target = os.path.normpath(directory)
        return any(os.path.normpath(entry) == target for entry in entries if entry)
