"""
Raw D-Bus replies shaped like Mutter's, for the tests.
"""

HDMI_MODES = ("1920x1080@60.000", "1280x720@60.000")
EDP_MODES = ("2560x1440@59.951", "1920x1080@59.963")


def mode_tuple(mode_id, width, height, rate, current=False, preferred=False,
               scales=(1.0, 2.0), preferred_scale=1.0):
    properties = {}
    if current:
        properties["is-current"] = True
    if preferred:
        properties["is-preferred"] = True
    return (mode_id, width, height, rate, preferred_scale, list(scales), properties)


def monitor_tuple(connector, modes, vendor="DEL", product="DELL U2720Q",
                  serial="ABC123", properties=None):
    return ((connector, vendor, product, serial), list(modes), properties or {})


def logical_tuple(x, y, scale, transform, primary, connectors):
    return (x, y, scale, transform, primary,
            [(c, "DEL", "DELL U2720Q", "ABC123") for c in connectors], {})


def hdmi_monitor(current=HDMI_MODES[0]):
    return monitor_tuple("HDMI-1", [
        mode_tuple(HDMI_MODES[0], 1920, 1080, 60.0, current=current == HDMI_MODES[0],
                   preferred=True),
        mode_tuple(HDMI_MODES[1], 1280, 720, 60.0, current=current == HDMI_MODES[1]),
    ], properties={"display-name": "Dell 27\"", "width-mm": 597})


def edp_monitor(current=EDP_MODES[0]):
    return monitor_tuple("eDP-1", [
        mode_tuple(EDP_MODES[0], 2560, 1440, 59.951, current=current == EDP_MODES[0],
                   preferred=True, scales=(1.0, 1.25, 1.5, 2.0), preferred_scale=1.5),
        mode_tuple(EDP_MODES[1], 1920, 1080, 59.963, current=current == EDP_MODES[1]),
    ], vendor="BOE", product="0x0747", serial="0x00000000",
        properties={"is-builtin": True})


def two_monitor_state(serial=5):
    """HDMI-1 primary at the origin, eDP-1 to its right."""
    return (
        serial,
        [hdmi_monitor(), edp_monitor()],
        [
            logical_tuple(0, 0, 1.0, 0, True, ["HDMI-1"]),
            logical_tuple(1920, 0, 1.5, 0, False, ["eDP-1"]),
        ],
        {
            "layout-mode": 1,
            "supports-changing-layout-mode": True,
            "global-scale-required": False,
            "renderer": "native",
        },
    )


def resources_reply(serial=7):
    crtcs = [
        (40, 40, 0, 0, 1920, 1080, 0, 0, [0, 1, 2, 3, 4, 5, 6, 7], {}),
        (41, 41, 1920, 0, 2560, 1440, 1, 0, [0], {}),
        (42, 42, 0, 0, 0, 0, -1, 0, [0], {}),
    ]
    outputs = [
        (50, 50, 40, [40, 41, 42], "HDMI-1", [0, 2], [], {"vendor": "DEL"}),
        (51, 51, 41, [40, 41, 42], "eDP-1", [1], [], {"vendor": "BOE"}),
        (52, 52, -1, [40, 41, 42], "DP-2", [], [], {}),
        (53, 53, 99, [40, 41, 42], "DP-3", [], [], {}),
    ]
    modes = [
        (0, 0, 1920, 1080, 60.0, 0),
        (1, 1, 2560, 1440, 59.951, 0),
        (2, 2, 1280, 720, 60.0, 0),
    ]
    return (serial, crtcs, outputs, modes, 8192, 8192)
