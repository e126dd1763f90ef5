"""
lookandfeel - installs dotfiles, configs, scripts and session hooks from a
look&feel repository into the user's home directory.
"""

__version__ = "1.0.0"

from .mirror import FileEntry, MirrorJob, MirrorResult, Outcome, TreeInstaller  # noqa: E402

__all__ = ["FileEntry", "MirrorJob", "MirrorResult", "Outcome", "TreeInstaller"]
