"""
Display Models - Snapshot of the compositor's monitor configuration
===================================================================

Value types mirroring the replies of Mutter's ``org.gnome.Mutter.DisplayConfig``
interface. A snapshot is built once from a reply (``from_dbus``) and treated
as read-only afterwards.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Rotation(enum.IntEnum):
    """Counter-clockwise rotation, valued as the Wayland transform bits."""
    NORMAL = 0
    RIGHT = 1      # 90°
    INVERTED = 2   # 180°
    LEFT = 3       # 270°

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


FLIPPED_BIT = 0b100
ROTATION_MASK = 0b011

_ORIENTATION_WORDS = {
    "normal": int(Rotation.NORMAL),
    "left": int(Rotation.LEFT),
    "right": int(Rotation.RIGHT),
    "inverted": int(Rotation.INVERTED),
    "flipped": FLIPPED_BIT,
}


@dataclass(frozen=True)
class Orientation:
    """Rotation combined with an optional flip."""
    rotation: Rotation = Rotation.NORMAL
    flipped: bool = False

    @classmethod
    def from_wire(cls, value: int) -> 'Orientation':
        """Build from the transform integer Mutter sends (0-7); higher bits are ignored."""
        value = int(value)
        return cls(
            rotation=Rotation(value & ROTATION_MASK),
            flipped=bool(value & FLIPPED_BIT),
        )

    def to_wire(self) -> int:
        return int(self.rotation) | (FLIPPED_BIT if self.flipped else 0)

    @classmethod
    def parse(cls, text: str) -> 'Orientation':
        """
        Parse a comma separated list such as ``"left"`` or ``"inverted,flipped"``.

        Words are OR-ed together the same way the wire bits are, so
        ``"right,inverted"`` yields ``Left``.

        Raises:
            InvalidArgumentError: If a word is not a known orientation
        """
        bits = 0
        for word in text.lower().split(','):
            word = word.strip()
            if word not in _ORIENTATION_WORDS:
                raise InvalidArgumentError(f"unknown orientation: {word!r}")
            bits |= _ORIENTATION_WORDS[word]
        return cls.from_wire(bits)

    def __str__(self) -> str:
        prefix = "Flipped " if self.flipped else ""
        return f"{prefix}{self.rotation.display_name}"


@dataclass(frozen=True)
class Displacement:
    """Position of a logical monitor in the global coordinate space, and its scale."""
    x: int
    y: int
    scale: float

    @classmethod
    def parse(cls, text: str) -> 'Displacement':
        """
        Parse ``"x,y,scale"``, e.g. ``"1920,0,1.5"``.

        Raises:
            InvalidArgumentError: If the text does not have exactly three valid fields
        """
        parts = text.lower().split(',')
        if len(parts) != 3:
            raise InvalidArgumentError(f"displacement must be 'x,y,scale', got {text!r}")
        try:
            return cls(x=int(parts[0]), y=int(parts[1]), scale=float(parts[2]))
        except ValueError:
            raise InvalidArgumentError(f"displacement must be 'x,y,scale', got {text!r}")

    def __str__(self) -> str:
        return f"x: {self.x}, y: {self.y}, scale: {self.scale}"


@dataclass(frozen=True)
class Transform:
    """Displacement plus orientation of a logical monitor."""
    displacement: Displacement
    orientation: Orientation = Orientation()

    @classmethod
    def from_wire(cls, x: int, y: int, scale: float, transform: int) -> 'Transform':
        return cls(
            displacement=Displacement(x=int(x), y=int(y), scale=float(scale)),
            orientation=Orientation.from_wire(transform),
        )

    def __str__(self) -> str:
        return f"{self.displacement}, {self.orientation}"


KNOWN_MODE_PROPERTY_KEYS = ("is-current", "is-preferred")


def _as_bool(properties: Dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean property, falling back when it is absent or not 0/1."""
    value = properties.get(key)
    if isinstance(value, (bool, int)) and value in (0, 1):
        return bool(value)
    return default


def _without(properties: Dict[str, Any], keys) -> Dict[str, Any]:
    return {k: v for k, v in properties.items() if k not in keys}


@dataclass(frozen=True)
class Mode:
    """A mode offered by a physical monitor."""
    id: str                      # mode ID, e.g. "1920x1080@60.000"
    width: int                   # physical pixels
    height: int                  # physical pixels
    refresh_rate: float
    preferred_scale: float
    supported_scales: Tuple[float, ...] = ()
    is_current: bool = False
    is_preferred: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'Mode':
        """Build from a ``(siiddada{sv})`` struct."""
        mode_id, width, height, refresh_rate, preferred_scale, scales, properties = result
        properties = dict(properties)
        return cls(
            id=str(mode_id),
            width=int(width),
            height=int(height),
            refresh_rate=float(refresh_rate),
            preferred_scale=float(preferred_scale),
            supported_scales=tuple(float(s) for s in scales),
            is_current=_as_bool(properties, "is-current", False),
            is_preferred=_as_bool(properties, "is-preferred", False),
            properties=_without(properties, KNOWN_MODE_PROPERTY_KEYS),
        )


@dataclass(frozen=True)
class MonitorDescription:
    """Identifies a physical monitor from inside a logical monitor."""
    connector: str               # e.g. "DP-1", "eDP-1"
    vendor: str
    product: str
    serial: str

    @classmethod
    def from_dbus(cls, result: tuple) -> 'MonitorDescription':
        connector, vendor, product, serial = result
        return cls(str(connector), str(vendor), str(product), str(serial))

    def __str__(self) -> str:
        return f"{self.connector} {self.vendor} {self.product} {self.serial}"


@dataclass(frozen=True)
class PhysicalMonitor:
    """
    A connected physical monitor.

    ``properties`` may contain "width-mm", "height-mm", "is-underscanning",
    "max-screen-size", "is-builtin" and "display-name".
    """
    connector: str
    vendor: str
    product: str
    serial: str
    modes: Tuple[Mode, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'PhysicalMonitor':
        """Build from a ``((ssss)a(siiddada{sv})a{sv})`` struct."""
        (connector, vendor, product, serial), modes, properties = result
        return cls(
            connector=str(connector),
            vendor=str(vendor),
            product=str(product),
            serial=str(serial),
            modes=tuple(Mode.from_dbus(m) for m in modes),
            properties=dict(properties),
        )

    @property
    def current_mode(self) -> Optional[Mode]:
        for mode in self.modes:
            if mode.is_current:
                return mode
        return None

    def find_mode(self, mode_id: str) -> Optional[Mode]:
        for mode in self.modes:
            if mode.id == mode_id:
                return mode
        return None


@dataclass(frozen=True)
class LogicalMonitor:
    """A region of the compositor's coordinate space, shown on one or more monitors."""
    transform: Transform
    primary: bool
    monitors: Tuple[MonitorDescription, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'LogicalMonitor':
        """Build from a ``(iiduba(ssss)a{sv})`` struct."""
        x, y, scale, transform, primary, monitors, properties = result
        return cls(
            transform=Transform.from_wire(x, y, scale, transform),
            primary=bool(primary),
            monitors=tuple(MonitorDescription.from_dbus(m) for m in monitors),
            properties=dict(properties),
        )

    @property
    def connectors(self) -> List[str]:
        return [m.connector for m in self.monitors]


class LayoutMode(enum.IntEnum):
    """How logical monitor sizes relate to the modes of their monitors."""
    LOGICAL = 1    # mode size divided by the logical monitor scale
    PHYSICAL = 2   # mode size, whatever the scale

    def __str__(self) -> str:
        return self.name.lower()


KNOWN_PROPERTY_KEYS = (
    "supports-mirroring",
    "layout-mode",
    "supports-changing-layout-mode",
    "global-scale-required",
)


@dataclass(frozen=True)
class KnownProperties:
    """Global properties of a DisplayConfig that gnome-randr understands."""
    supports_mirroring: bool = True
    layout_mode: LayoutMode = LayoutMode.LOGICAL
    supports_changing_layout_mode: bool = False
    global_scale_required: bool = False

    @classmethod
    def from_dbus(cls, properties: Dict[str, Any]) -> 'KnownProperties':
        layout_mode = properties.get("layout-mode")
        return cls(
            supports_mirroring=_as_bool(properties, "supports-mirroring", True),
            layout_mode=LayoutMode.PHYSICAL if layout_mode == 2 else LayoutMode.LOGICAL,
            supports_changing_layout_mode=_as_bool(
                properties, "supports-changing-layout-mode", False),
            global_scale_required=_as_bool(properties, "global-scale-required", False),
        )


@dataclass(frozen=True)
class DisplayConfig:
    """
    One atomic snapshot of the monitor configuration.

    ``serial`` must be passed back with any change built from this snapshot;
    the compositor rejects the change if its own serial has moved on.
    """
    serial: int
    monitors: Tuple[PhysicalMonitor, ...] = ()
    logical_monitors: Tuple[LogicalMonitor, ...] = ()
    known_properties: KnownProperties = KnownProperties()
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'DisplayConfig':
        """Build from the reply of ``GetCurrentState``."""
        serial, monitors, logical_monitors, properties = result
        properties = dict(properties)
        config = cls(
            serial=int(serial),
            monitors=tuple(PhysicalMonitor.from_dbus(m) for m in monitors),
            logical_monitors=tuple(LogicalMonitor.from_dbus(lm) for lm in logical_monitors),
            known_properties=KnownProperties.from_dbus(properties),
            properties=_without(properties, KNOWN_PROPERTY_KEYS),
        )
        logger.debug(
            f"DisplayConfig serial={config.serial}: {len(config.monitors)} monitor(s), "
            f"{len(config.logical_monitors)} logical monitor(s)"
        )
        return config


@dataclass(frozen=True)
class Crtc:
    """
    A CRTC scans out a portion of the compositor space to one or more outputs.

    The geometry is only meaningful while the CRTC is in use.
    """
    id: int
    winsys_id: int               # XID, KMS handle, ...
    x: int
    y: int
    width: int
    height: int
    current_mode: int            # -1 if unused
    current_transform: int
    transforms: Tuple[int, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'Crtc':
        """Build from a ``(uxiiiiiuaua{sv})`` struct."""
        (crtc_id, winsys_id, x, y, width, height,
         current_mode, current_transform, transforms, properties) = result
        return cls(
            id=int(crtc_id),
            winsys_id=int(winsys_id),
            x=int(x),
            y=int(y),
            width=int(width),
            height=int(height),
            current_mode=int(current_mode),
            current_transform=int(current_transform),
            transforms=tuple(int(t) for t in transforms),
            properties=dict(properties),
        )


@dataclass(frozen=True)
class Output:
    """A physical screen attached to a connector."""
    id: int
    winsys_id: int
    current_crtc: int            # -1 if the output is disabled
    possible_crtcs: Tuple[int, ...]
    name: str                    # connector name, e.g. "HDMI-1"
    modes: Tuple[int, ...] = ()
    clones: Tuple[int, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dbus(cls, result: tuple) -> 'Output':
        """Build from a ``(uxiausauaua{sv})`` struct."""
        output_id, winsys_id, current_crtc, possible, name, modes, clones, properties = result
        return cls(
            id=int(output_id),
            winsys_id=int(winsys_id),
            current_crtc=int(current_crtc),
            possible_crtcs=tuple(int(c) for c in possible),
            name=str(name),
            modes=tuple(int(m) for m in modes),
            clones=tuple(int(c) for c in clones),
            properties=dict(properties),
        )

    @property
    def enabled(self) -> bool:
        return self.current_crtc >= 0


@dataclass(frozen=True)
class ResourceMode:
    """A mode as listed by ``GetResources`` (numeric id, shared between outputs)."""
    id: int
    winsys_id: int
    width: int
    height: int
    frequency: float
    flags: int                   # xf86drmMode.h / randr.h flags

    @classmethod
    def from_dbus(cls, result: tuple) -> 'ResourceMode':
        mode_id, winsys_id, width, height, frequency, flags = result
        return cls(int(mode_id), int(winsys_id), int(width), int(height),
                   float(frequency), int(flags))


@dataclass(frozen=True)
class Resources:
    """Snapshot of CRTCs, outputs and modes, used by gamma operations."""
    serial: int
    crtcs: Tuple[Crtc, ...] = ()
    outputs: Tuple[Output, ...] = ()
    modes: Tuple[ResourceMode, ...] = ()
    max_screen_width: int = 0
    max_screen_height: int = 0

    @classmethod
    def from_dbus(cls, result: tuple) -> 'Resources':
        """Build from the reply of ``GetResources``."""
        serial, crtcs, outputs, modes, max_width, max_height = result
        return cls(
            serial=int(serial),
            crtcs=tuple(Crtc.from_dbus(c) for c in crtcs),
            outputs=tuple(Output.from_dbus(o) for o in outputs),
            modes=tuple(ResourceMode.from_dbus(m) for m in modes),
            max_screen_width=int(max_width),
            max_screen_height=int(max_height),
        )
