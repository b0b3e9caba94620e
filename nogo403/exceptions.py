"""Exception hierarchy for the probe engine"""


class ProbeError(Exception):
    """Base class for every error that aborts a probe run"""


class TargetError(ProbeError):
    """The target URI cannot be used"""


class ConfigError(ProbeError):
    """An option value cannot be used"""


class PayloadError(ProbeError):
    """A payload list is missing or unreadable"""

    def __init__(self, name: str, reason: str):
        super().__init__(f"payload list '{name}': {reason}")
        self.name = name
        self.reason = reason


class TransportError(ProbeError):
    """A single request could not be sent or got no HTTP response"""

    def __init__(self, method: str, uri: str, cause: Exception):
        super().__init__(f"{method} {uri} failed: {type(cause).__name__}: {cause}")
        self.method = method
        self.uri = uri
        self.cause = cause
