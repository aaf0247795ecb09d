"""
Errors - Failure kinds for display configuration operations
============================================================

Every error is terminal for the operation that raised it. Nothing is
applied partially and nothing is retried here; the caller decides whether
to fetch a fresh snapshot and try again.
"""


class DisplayConfigError(Exception):
    """Base class for all gnome-randr errors."""
    pass


class NotFoundError(DisplayConfigError):
    """A connector is unknown, or not part of any logical monitor."""

    def __init__(self, connector: str, what: str = "output"):
        self.connector = connector
        super().__init__(f"unable to find {what} '{connector}'")


class NoCurrentModeError(DisplayConfigError):
    """A physical monitor in the snapshot has no mode flagged as current."""

    def __init__(self, connector: str):
        self.connector = connector
        super().__init__(f"monitor '{connector}' has no current mode")


class InvalidArgumentError(DisplayConfigError, ValueError):
    """Malformed input: bad transform text, empty gamma ramp, and so on."""
    pass


class ConflictError(DisplayConfigError):
    """The compositor rejected a write because the snapshot serial is stale."""

    def __init__(self, serial: int, message: str = ""):
        self.serial = serial
        detail = f": {message}" if message else ""
        super().__init__(f"configuration changed since serial {serial}{detail}")


class TransportError(DisplayConfigError):
    """Opaque failure talking to the compositor."""

    def __init__(self, message: str, dbus_name: str = None):
        self.dbus_name = dbus_name
        super().__init__(message)
