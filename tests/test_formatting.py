#!/usr/bin/env python3
"""
Tests for the text output of query.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from gnome_randr.formatting import (
    format_display_config, format_logical_monitor, format_mode, format_pair,
    format_physical_monitor,
)
from gnome_randr.locator import search
from gnome_randr.models import DisplayConfig
from display_fixtures import HDMI_MODES, two_monitor_state


class TestFormatting(unittest.TestCase):

    def setUp(self):
        self.config = DisplayConfig.from_dbus(two_monitor_state())

    def test_mode_line(self):
        line = format_mode(self.config.monitors[0].modes[0])
        self.assertTrue(line.startswith(HDMI_MODES[0].rjust(30)))
        self.assertIn("60.00*+", line)
        self.assertTrue(line.endswith("[x1.00+, x2.00]"))

        other = format_mode(self.config.monitors[0].modes[1])
        self.assertIn("60.00", other)
        self.assertNotIn("*", other)

    def test_preferred_scale_marker(self):
        line = format_mode(self.config.monitors[1].modes[0])
        self.assertTrue(line.endswith("[x1.00, x1.25, x1.50+, x2.00]"))

    def test_logical_monitor(self):
        self.assertEqual(
            format_logical_monitor(self.config.logical_monitors[0]),
            "x: 0, y: 0, scale: 1.0, rotation: Normal, primary: yes\n"
            "associated physical monitors:\n"
            "\tHDMI-1 DEL DELL U2720Q ABC123\n"
        )

    def test_physical_monitor(self):
        lines = format_physical_monitor(self.config.monitors[0]).splitlines()
        self.assertEqual(lines[0], "HDMI-1 DEL DELL U2720Q ABC123")
        self.assertEqual(len(lines), 1 + 2 + 2)
        self.assertEqual(lines[-1], "width-mm: 597")

    def test_summary(self):
        text = format_display_config(self.config, summary=True)
        self.assertTrue(text.startswith("logical monitor 0:\n"))
        self.assertIn("logical monitor 1:\nx: 1920, y: 0, scale: 1.5", text)
        self.assertNotIn("supports-mirroring", text)
        self.assertNotIn("2560x1440@59.951", text)

    def test_full(self):
        text = format_display_config(self.config)
        self.assertTrue(text.startswith(
            "supports-mirroring: true\n"
            "layout-mode: logical\n"
            "supports-changing-layout-mode: true\n"
            "global-scale-required: false\n"
            "renderer: 'native'\n"
        ))
        self.assertIn("2560x1440@59.951", text)
        self.assertIn("is-builtin: True", text)

    def test_pair(self):
        logical, physical = search(self.config, "eDP-1")
        text = format_pair(logical, physical)
        self.assertIn("primary: no", text)
        self.assertIn("\neDP-1 BOE 0x0747 0x00000000\n", text)


if __name__ == '__main__':
    unittest.main()
