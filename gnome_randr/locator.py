"""
Locator - Resolve connector names against a snapshot
====================================================
"""

import logging
from typing import Tuple

from .errors import NotFoundError
from .models import Crtc, DisplayConfig, LogicalMonitor, PhysicalMonitor, Resources

logger = logging.getLogger(__name__)


def search(config: DisplayConfig, connector: str) -> Tuple[LogicalMonitor, PhysicalMonitor]:
    """
    Find the logical and physical monitor for a connector.

    Args:
        config: Snapshot to search
        connector: Connector name, e.g. "HDMI-1"

    Returns:
        Tuple of (logical_monitor, physical_monitor)

    Raises:
        NotFoundError: If the connector is unknown, or its monitor is not
            part of any logical monitor (i.e. it is disabled)
    """
    physical_monitor = next(
        (m for m in config.monitors if m.connector == connector), None)
    logical_monitor = next(
        (lm for lm in config.logical_monitors if connector in lm.connectors), None)

    if physical_monitor is None or logical_monitor is None:
        logger.debug(
            f"search({connector!r}): physical={physical_monitor is not None}, "
            f"logical={logical_monitor is not None}"
        )
        raise NotFoundError(connector)
    return logical_monitor, physical_monitor


def find_crtc(resources: Resources, connector: str) -> Crtc:
    """
    Find the CRTC currently driving the output on a connector.

    Raises:
        NotFoundError: If there is no such output, the output is disabled,
            or it points at a CRTC missing from the snapshot
    """
    output = next((o for o in resources.outputs if o.name == connector), None)
    if output is None:
        raise NotFoundError(connector)
    if not output.enabled:
        raise NotFoundError(connector, what="active CRTC for output")

    for crtc in resources.crtcs:
        if crtc.id == output.current_crtc:
            return crtc
    logger.warning(f"Output {connector} references unknown CRTC {output.current_crtc}")
    raise NotFoundError(connector, what="active CRTC for output")
