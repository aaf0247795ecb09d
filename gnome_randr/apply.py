"""
Apply Configs - Turn a single-monitor change into a full layout
===============================================================

``ApplyMonitorsConfig`` replaces the whole layout: any logical monitor left
out of the request is switched off. ``build_apply_configs`` therefore takes a
change to one monitor and produces an entry for every logical monitor in the
snapshot, with the untouched ones passed through as they are.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from .errors import InvalidArgumentError, NoCurrentModeError
from .locator import search
from .models import (
    DisplayConfig, Displacement, LogicalMonitor, Orientation, PhysicalMonitor, Transform,
)

logger = logging.getLogger(__name__)


@dataclass
class ApplyMonitor:
    """A physical monitor and the mode it should run in."""
    connector: str
    mode_id: str
    properties: Dict[str, Any] = field(default_factory=dict)

    def serialize(self) -> Tuple[str, str, Dict[str, Any]]:
        """Shape as a ``(ssa{sv})`` struct."""
        return (self.connector, self.mode_id, dict(self.properties))


@dataclass
class ApplyConfig:
    """One logical monitor as sent to ``ApplyMonitorsConfig``."""
    transform: Transform
    primary: bool
    monitors: List[ApplyMonitor] = field(default_factory=list)

    @classmethod
    def from_monitors(
        cls,
        logical_monitor: LogicalMonitor,
        physical_monitors: Sequence[PhysicalMonitor],
    ) -> 'ApplyConfig':
        """
        Describe a logical monitor exactly as it currently is.

        Raises:
            NoCurrentModeError: If one of the physical monitors has no current mode
        """
        monitors = []
        for physical_monitor in physical_monitors:
            mode = physical_monitor.current_mode
            if mode is None:
                raise NoCurrentModeError(physical_monitor.connector)
            monitors.append(ApplyMonitor(physical_monitor.connector, mode.id))
        return cls(
            transform=logical_monitor.transform,
            primary=logical_monitor.primary,
            monitors=monitors,
        )

    def find_monitor(self, connector: str) -> ApplyMonitor:
        for monitor in self.monitors:
            if monitor.connector == connector:
                return monitor
        raise KeyError(connector)

    def serialize(self) -> Tuple[int, int, float, int, bool, List[tuple]]:
        """Shape as a ``(iiduba(ssa{sv}))`` struct."""
        displacement = self.transform.displacement
        return (
            displacement.x,
            displacement.y,
            displacement.scale,
            self.transform.orientation.to_wire(),
            self.primary,
            [monitor.serialize() for monitor in self.monitors],
        )


@dataclass(frozen=True)
class SetOrientation:
    orientation: Orientation


@dataclass(frozen=True)
class SetDisplacement:
    displacement: Displacement


@dataclass(frozen=True)
class SetScale:
    scale: float


@dataclass(frozen=True)
class SetMode:
    mode_id: str


@dataclass(frozen=True)
class SetPrimary:
    pass


@dataclass(frozen=True)
class SetProperty:
    """Per-monitor property sent along with the mode, e.g. "underscanning"."""
    name: str
    value: str


Action = Union[SetOrientation, SetDisplacement, SetScale, SetMode, SetPrimary, SetProperty]


def describe_action(action: Action) -> str:
    """Human-readable description, used for dry runs."""
    if isinstance(action, SetOrientation):
        return f"setting orientation to {action.orientation}"
    if isinstance(action, SetDisplacement):
        return f"setting displacement to {action.displacement}"
    if isinstance(action, SetScale):
        return f"setting scale to {action.scale}"
    if isinstance(action, SetMode):
        return f"setting mode to {action.mode_id}"
    if isinstance(action, SetPrimary):
        return "setting monitor as primary"
    if isinstance(action, SetProperty):
        return f"setting property {action.name} to {action.value}"
    raise TypeError(f"not an action: {action!r}")


def _touched_fields(action: Action) -> Set[str]:
    if isinstance(action, SetOrientation):
        return {"orientation"}
    if isinstance(action, SetDisplacement):
        return {"position", "scale"}
    if isinstance(action, SetScale):
        return {"scale"}
    if isinstance(action, SetMode):
        return {"mode"}
    if isinstance(action, SetPrimary):
        return {"primary"}
    if isinstance(action, SetProperty):
        return {f"property:{action.name}"}
    raise TypeError(f"not an action: {action!r}")


def find_conflicts(actions: Sequence[Action]) -> List[str]:
    """Return the fields written by more than one action, in sorted order."""
    counts = Counter()
    for action in actions:
        counts.update(_touched_fields(action))
    return sorted(name for name, count in counts.items() if count > 1)


def apply_action(config: ApplyConfig, action: Action, physical_monitor: PhysicalMonitor):
    """
    Apply one action to the target's ApplyConfig in place.

    Raises:
        InvalidArgumentError: If a SetMode names a mode the monitor does not offer
    """
    if isinstance(action, SetOrientation):
        config.transform = replace(config.transform, orientation=action.orientation)
    elif isinstance(action, SetDisplacement):
        config.transform = replace(config.transform, displacement=action.displacement)
    elif isinstance(action, SetScale):
        displacement = replace(config.transform.displacement, scale=action.scale)
        config.transform = replace(config.transform, displacement=displacement)
    elif isinstance(action, SetMode):
        if physical_monitor.find_mode(action.mode_id) is None:
            raise InvalidArgumentError(
                f"monitor '{physical_monitor.connector}' has no mode '{action.mode_id}'")
        config.find_monitor(physical_monitor.connector).mode_id = action.mode_id
    elif isinstance(action, SetPrimary):
        config.primary = True
    elif isinstance(action, SetProperty):
        config.find_monitor(physical_monitor.connector).properties[action.name] = action.value
    else:
        raise TypeError(f"not an action: {action!r}")


def _resolve_monitors(
    config: DisplayConfig,
    logical_monitor: LogicalMonitor,
    first: Optional[PhysicalMonitor] = None,
) -> List[PhysicalMonitor]:
    """Physical monitors of a logical monitor, looked up by connector."""
    by_connector = {m.connector: m for m in config.monitors}
    resolved = [first] if first is not None else []
    for description in logical_monitor.monitors:
        if first is not None and description.connector == first.connector:
            continue
        physical_monitor = by_connector.get(description.connector)
        if physical_monitor is None:
            logger.warning(
                f"Logical monitor references unknown connector {description.connector}, skipping it")
            continue
        resolved.append(physical_monitor)
    return resolved


def _check_scale(config: ApplyConfig, physical_monitor: PhysicalMonitor):
    mode = physical_monitor.find_mode(config.find_monitor(physical_monitor.connector).mode_id)
    scale = config.transform.displacement.scale
    if mode is not None and mode.supported_scales and not any(
            math.isclose(scale, s, rel_tol=1e-6) for s in mode.supported_scales):
        logger.warning(
            f"Scale {scale} is not listed for mode {mode.id} on {physical_monitor.connector}; "
            f"supported: {', '.join(f'{s:.2f}' for s in mode.supported_scales)}"
        )


def build_apply_configs(
    config: DisplayConfig,
    target_connector: str,
    actions: Sequence[Action],
    strict: bool = False,
) -> List[ApplyConfig]:
    """
    Build the full ``ApplyMonitorsConfig`` payload for a change to one monitor.

    Actions are applied in order; when two of them write the same field the
    later one wins. That is logged as a warning, or rejected when ``strict``.

    If the actions include SetPrimary, every other logical monitor is sent
    with ``primary=False``. Otherwise all other logical monitors keep their
    transform, primary flag and current mode.

    Args:
        config: Snapshot the change is based on
        target_connector: Connector of the monitor to change
        actions: Changes to make, in precedence order
        strict: Reject actions that overwrite each other

    Returns:
        One ApplyConfig per logical monitor, in snapshot order

    Raises:
        InvalidArgumentError: If there are no actions, or they conflict in strict mode
        NotFoundError: If the connector is unknown or disabled
        NoCurrentModeError: If a monitor in the snapshot has no current mode
    """
    if not actions:
        raise InvalidArgumentError("no changes requested")

    conflicts = find_conflicts(actions)
    if conflicts:
        message = f"more than one action sets {', '.join(conflicts)}"
        if strict:
            raise InvalidArgumentError(message)
        logger.warning(f"{message}; the last one wins")

    target_logical, target_physical = search(config, target_connector)

    target = ApplyConfig.from_monitors(
        target_logical, _resolve_monitors(config, target_logical, first=target_physical))
    for action in actions:
        logger.debug(f"{target_connector}: {describe_action(action)}")
        apply_action(target, action, target_physical)

    if any(isinstance(a, (SetScale, SetDisplacement, SetMode)) for a in actions):
        _check_scale(target, target_physical)

    primary_is_changing = any(isinstance(a, SetPrimary) for a in actions)

    configs = []
    for logical_monitor in config.logical_monitors:
        if logical_monitor is target_logical:
            configs.append(target)
            continue

        physical_monitors = _resolve_monitors(config, logical_monitor)
        if not physical_monitors:
            logger.warning(
                f"Skipping logical monitor at {logical_monitor.transform.displacement}: "
                f"no known physical monitor")
            continue

        passthrough = ApplyConfig.from_monitors(logical_monitor, physical_monitors)
        if primary_is_changing:
            passthrough.primary = False
        configs.append(passthrough)

    return configs
