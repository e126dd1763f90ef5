class LookAndFeelError(Exception):
    """Base class for errors that abort an installation step."""


class ConfigError(LookAndFeelError):
    pass


class FetchError(LookAndFeelError):
    pass


class MirrorError(LookAndFeelError):
    """A mirror pass could not continue (destination uncreatable, copy failed)."""


class HookError(LookAndFeelError):
    pass
