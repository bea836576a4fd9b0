"""Startup errors raised while assembling and binding the server.

All of these are fatal: the process logs them and exits non-zero.
Per-request errors never pass through here.
"""


class BootstrapError(Exception):
    """Base class for fatal startup errors."""

    pass


class ConfigurationError(BootstrapError):
    """Raised when a required setting is missing or unusable."""

    pass


class InvalidPortError(BootstrapError, ValueError):
    """Raised when the PORT value is not a valid TCP port."""

    pass


class MissingCollaboratorError(BootstrapError):
    """Raised when a shared collaborator was never initialized."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Required collaborator '{name}' is not initialized")


class PortBindError(BootstrapError):
    """Raised when the listen socket cannot be bound."""

    def __init__(self, host: str, port: int, cause: OSError) -> None:
        self.host = host
        self.port = port
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot listen on {host}:{port}: {reason}")
