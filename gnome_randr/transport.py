"""
Transport - org.gnome.Mutter.DisplayConfig over D-Bus
=====================================================

Thin client for the methods gnome-randr needs. Replies are converted from
dbus-python types to plain Python before being handed to the models, and
D-Bus failures are mapped onto the gnome-randr error kinds.
"""

import enum
import logging
from typing import Any, List, Optional, Sequence

from .apply import ApplyConfig
from .errors import ConflictError, TransportError
from .gamma import GammaRamp
from .models import DisplayConfig, Resources

logger = logging.getLogger(__name__)

# dbus-python needs libdbus and is an optional extra
try:
    import dbus
    DBUS_AVAILABLE = True
    DBUS_ERRORS = (dbus.exceptions.DBusException,)
except ImportError:
    dbus = None
    DBUS_AVAILABLE = False
    DBUS_ERRORS = ()

BUS_NAME = "org.gnome.Mutter.DisplayConfig"
OBJECT_PATH = "/org/gnome/Mutter/DisplayConfig"
INTERFACE = "org.gnome.Mutter.DisplayConfig"

# Mutter answers a stale serial with AccessDenied and this message
ACCESS_DENIED = "org.freedesktop.DBus.Error.AccessDenied"
STALE_MARKER = "stale"

DEFAULT_TIMEOUT_MS = 5000


class ApplyMethod(enum.IntEnum):
    """``method`` argument of ApplyMonitorsConfig."""
    VERIFY = 0
    TEMPORARY = 1
    PERSISTENT = 2


def to_python(value: Any) -> Any:
    """Recursively turn dbus-python values into plain Python values."""
    if dbus is not None and isinstance(value, dbus.Boolean):
        return bool(value)
    if isinstance(value, dict):
        return {to_python(k): to_python(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return tuple(to_python(v) for v in value)
    if isinstance(value, list):
        return [to_python(v) for v in value]
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    return value


class MutterDisplayConfig:
    """
    Client for Mutter's DisplayConfig interface.

    Every write takes the serial of the snapshot it was built from. Mutter
    rejects the write if the configuration changed in between, which is
    raised as ConflictError; nothing is retried here.
    """

    def __init__(self, interface: Any, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        """
        Args:
            interface: A ``dbus.Interface`` (or anything with the same methods)
            timeout_ms: Timeout for each call in milliseconds
        """
        self._interface = interface
        self.timeout_ms = timeout_ms

    @classmethod
    def connect(cls, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> 'MutterDisplayConfig':
        """
        Connect to Mutter on the session bus.

        Raises:
            TransportError: If dbus-python is missing or the bus is unreachable
        """
        if not DBUS_AVAILABLE:
            raise TransportError(
                "dbus-python is not installed. Install with: pip install dbus-python")
        try:
            bus = dbus.SessionBus()
            proxy = bus.get_object(BUS_NAME, OBJECT_PATH)
            interface = dbus.Interface(proxy, dbus_interface=INTERFACE)
        except DBUS_ERRORS as e:
            logger.error(f"Cannot reach {BUS_NAME}: {e}")
            raise TransportError(f"cannot reach {BUS_NAME}: {e}",
                                 dbus_name=e.get_dbus_name())
        logger.debug(f"Connected to {BUS_NAME}")
        return cls(interface, timeout_ms)

    def _call(self, method: str, *args, serial: Optional[int] = None) -> Any:
        logger.debug(f"D-Bus {method}")
        try:
            reply = getattr(self._interface, method)(*args, timeout=self.timeout_ms / 1000.0)
        except DBUS_ERRORS as e:
            name = e.get_dbus_name()
            message = e.get_dbus_message() or ""
            logger.error(f"D-Bus {method} failed: {name}: {message}")
            if serial is not None and name == ACCESS_DENIED and STALE_MARKER in message.lower():
                raise ConflictError(serial, message)
            raise TransportError(f"{method} failed: {message or name}", dbus_name=name)
        return to_python(reply)

    def fetch_display_config(self) -> DisplayConfig:
        return DisplayConfig.from_dbus(self._call("GetCurrentState"))

    def fetch_resources(self) -> Resources:
        return Resources.from_dbus(self._call("GetResources"))

    def fetch_gamma_ramp(self, serial: int, crtc_id: int) -> GammaRamp:
        return GammaRamp.from_dbus(self._call("GetCrtcGamma", serial, crtc_id, serial=serial))

    def apply_configs(self, serial: int, persistent: bool, configs: Sequence[ApplyConfig]):
        """
        Submit a complete layout.

        Args:
            serial: Serial of the DisplayConfig the layout was built from
            persistent: Remember the layout for this set of monitors
            configs: One entry per logical monitor; anything left out is disabled

        Raises:
            ConflictError: If the serial is stale
            TransportError: For any other failure
        """
        method = ApplyMethod.PERSISTENT if persistent else ApplyMethod.TEMPORARY
        payload: List[tuple] = [config.serialize() for config in configs]
        logger.info(f"Applying {len(payload)} logical monitor(s), serial={serial}, method={method.name}")
        self._call("ApplyMonitorsConfig", serial, int(method), payload, {}, serial=serial)

    def write_gamma_ramp(self, serial: int, crtc_id: int, ramp: GammaRamp):
        """
        Raises:
            ConflictError: If the serial is stale
            TransportError: For any other failure
        """
        red, green, blue = ramp.serialize()
        logger.info(f"Writing gamma ramp of size {ramp.size} to CRTC {crtc_id}, serial={serial}")
        self._call("SetCrtcGamma", serial, crtc_id, red, green, blue, serial=serial)
