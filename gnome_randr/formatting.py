"""
Formatting - Human-readable rendering of a DisplayConfig
========================================================
"""

from typing import Any, Dict, List

from .models import (
    DisplayConfig, KnownProperties, LogicalMonitor, Mode, PhysicalMonitor,
)


def _flag(value: bool, icon: str) -> str:
    return icon if value else ""


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _properties(properties: Dict[str, Any]) -> List[str]:
    return [f"{key}: {properties[key]!r}" for key in sorted(properties)]


def format_mode(mode: Mode) -> str:
    """
    One mode per line, e.g.::

        1920x1080@60.000    1920x1080     60.00*+     [x1.00+, x2.00]

    ``*`` marks the current mode, ``+`` the preferred mode and scale.
    """
    rate = f"{mode.refresh_rate:.2f}{_flag(mode.is_current, '*')}{_flag(mode.is_preferred, '+')}"
    scales = ", ".join(
        f"x{scale:.2f}{_flag(scale == mode.preferred_scale, '+')}"
        for scale in mode.supported_scales
    )
    return f"{mode.id:>30}\t{f'{mode.width}x{mode.height}':<10}\t{rate:<10}\t[{scales}]"


def format_physical_monitor(monitor: PhysicalMonitor) -> str:
    lines = [f"{monitor.connector} {monitor.vendor} {monitor.product} {monitor.serial}"]
    lines.extend(format_mode(mode) for mode in monitor.modes)
    lines.extend(_properties(monitor.properties))
    return "\n".join(lines) + "\n"


def format_logical_monitor(monitor: LogicalMonitor) -> str:
    displacement = monitor.transform.displacement
    lines = [
        f"x: {displacement.x}, y: {displacement.y}, scale: {displacement.scale}, "
        f"rotation: {monitor.transform.orientation}, primary: {'yes' if monitor.primary else 'no'}",
        "associated physical monitors:",
    ]
    lines.extend(f"\t{description}" for description in monitor.monitors)
    lines.extend(_properties(monitor.properties))
    return "\n".join(lines) + "\n"


def format_known_properties(properties: KnownProperties) -> str:
    return (
        f"supports-mirroring: {_bool(properties.supports_mirroring)}\n"
        f"layout-mode: {properties.layout_mode}\n"
        f"supports-changing-layout-mode: {_bool(properties.supports_changing_layout_mode)}\n"
        f"global-scale-required: {_bool(properties.global_scale_required)}\n"
    )


def format_display_config(config: DisplayConfig, summary: bool = False) -> str:
    """
    Render the whole snapshot.

    Args:
        config: Snapshot to render
        summary: Only list the logical monitors
    """
    parts = []
    if not summary:
        parts.append(format_known_properties(config.known_properties))
        parts.extend(line + "\n" for line in _properties(config.properties))
        parts.append("\n")

    for index, monitor in enumerate(config.logical_monitors):
        parts.append(f"logical monitor {index}:\n{format_logical_monitor(monitor)}\n")

    if not summary:
        for monitor in config.monitors:
            parts.append(f"{format_physical_monitor(monitor)}\n")
    return "".join(parts)


def format_pair(logical_monitor: LogicalMonitor, physical_monitor: PhysicalMonitor) -> str:
    """Render one monitor as found by the locator."""
    return f"{format_logical_monitor(logical_monitor)}\n{format_physical_monitor(physical_monitor)}"
