"""
gnome-randr - Query and change monitor layouts on GNOME
=======================================================

Works against Mutter's ``org.gnome.Mutter.DisplayConfig`` D-Bus interface,
so it also works on Wayland where xrandr cannot change anything:
- Query monitors, modes and logical monitor layout
- Rotate, flip, move, scale a monitor, change its mode, make it primary
- Adjust brightness through the CRTC gamma ramp
"""

__version__ = "0.2.0"

from .apply import (
    ApplyConfig, ApplyMonitor, SetDisplacement, SetMode, SetOrientation,
    SetPrimary, SetProperty, SetScale, build_apply_configs,
)
from .config import Config
from .errors import (
    ConflictError, DisplayConfigError, InvalidArgumentError, NoCurrentModeError,
    NotFoundError, TransportError,
)
from .gamma import GammaInfo, GammaRamp, fit, generate
from .locator import find_crtc, search
from .models import DisplayConfig, Displacement, Orientation, Resources, Rotation, Transform
from .transport import MutterDisplayConfig

__all__ = [
    "ApplyConfig",
    "ApplyMonitor",
    "SetDisplacement",
    "SetMode",
    "SetOrientation",
    "SetPrimary",
    "SetProperty",
    "SetScale",
    "build_apply_configs",
    "Config",
    "ConflictError",
    "DisplayConfigError",
    "InvalidArgumentError",
    "NoCurrentModeError",
    "NotFoundError",
    "TransportError",
    "GammaInfo",
    "GammaRamp",
    "fit",
    "generate",
    "find_crtc",
    "search",
    "DisplayConfig",
    "Displacement",
    "Orientation",
    "Resources",
    "Rotation",
    "Transform",
    "MutterDisplayConfig",
]
