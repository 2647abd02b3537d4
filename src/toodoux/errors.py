"""
toodoux - Error Types
=====================
Every failure the core can report. All of them end the current
invocation; nothing is retried.
"""


class ToodouxError(Exception):
    """Base class for all toodoux errors"""


class ValidationError(ToodouxError):
    """Metadata extracted from the command line is not usable"""


class InvalidValue(ValidationError):
    """A tag carries a literal that cannot be interpreted"""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"invalid value {token!r}: {reason}")


class InvalidDependency(ValidationError):
    """A dependency points at the task itself or at no task at all"""

    def __init__(self, uid: int, reason: str):
        self.uid = uid
        self.reason = reason
        super().__init__(f"invalid dependency on task {uid}: {reason}")


class LoadError(ToodouxError):
    """The task store cannot be read"""


class SaveError(ToodouxError):
    """The task store cannot be written"""


class ConfigError(ToodouxError):
    """The configuration file is malformed"""
