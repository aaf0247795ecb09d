#!/usr/bin/env python3
"""
Tests for gamma ramp fitting and generation.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gnome_randr.errors import InvalidArgumentError
from gnome_randr.gamma import (
    MAX_VALUE, GammaInfo, GammaRamp, find_last_non_clamped, fit, generate,
)


def sampled_ramp(size, brightness, gamma):
    """A channel sampled at (k + 1) / size, the grid the fit reads from."""
    return tuple(
        min(MAX_VALUE, int(round(((k + 1) / size) ** gamma * brightness * MAX_VALUE)))
        for k in range(size)
    )


class TestFindLastNonClamped(unittest.TestCase):

    def test_positions(self):
        self.assertEqual(find_last_non_clamped([0, 100, 65535, 65535]), 1)
        self.assertEqual(find_last_non_clamped([0, 100, 200, 300]), 3)

    def test_fully_clamped(self):
        self.assertEqual(find_last_non_clamped([65535] * 4), 0)


class TestGammaRamp(unittest.TestCase):

    def test_validate(self):
        GammaRamp((0, 1), (0, 1), (0, 1)).validate()
        with self.assertRaises(InvalidArgumentError):
            GammaRamp((0, 1), (0, 1), (0,)).validate()
        with self.assertRaises(InvalidArgumentError):
            GammaRamp((), (), ()).validate()

    def test_from_dbus(self):
        ramp = GammaRamp.from_dbus(([0, 65535], [0, 32768], [0, 1]))
        self.assertEqual(ramp.size, 2)
        self.assertEqual(ramp.green, (0, 32768))
        self.assertEqual(ramp.serialize(), ([0, 65535], [0, 32768], [0, 1]))


class TestGenerate(unittest.TestCase):

    def test_identity_is_exact(self):
        ramp = generate(GammaInfo(1.0, 1.0, 1.0, 1.0), 256)
        expected = tuple(k * 257 for k in range(256))
        self.assertEqual(ramp.red, expected)
        self.assertEqual(ramp.green, expected)
        self.assertEqual(ramp.blue, expected)

    def test_zero_exponent_means_linear(self):
        self.assertEqual(generate(GammaInfo(1.0, 0.0, 0.0, 0.0), 16),
                         generate(GammaInfo(1.0, 1.0, 1.0, 1.0), 16))

    def test_brightness_scales_output(self):
        ramp = generate(GammaInfo(0.5, 1.0, 1.0, 1.0), 256)
        self.assertEqual(ramp.red[0], 0)
        self.assertEqual(ramp.red[-1], 32767)
        self.assertEqual(list(ramp.red), sorted(ramp.red))

    def test_curve_is_clamped_and_monotonic(self):
        ramp = generate(GammaInfo(1.2, 2.2, 1.0, 0.8), 1024)
        for channel in ramp.channels:
            self.assertEqual(len(channel), 1024)
            self.assertEqual(channel[0], 0)
            self.assertEqual(channel[-1], MAX_VALUE)
            self.assertEqual(list(channel), sorted(channel))

    def test_exponent_is_inverted(self):
        # A gamma of 2 lifts the middle of the curve
        ramp = generate(GammaInfo(1.0, 2.0, 2.0, 2.0), 3)
        self.assertEqual(ramp.red[1], int(0.5 ** 0.5 * MAX_VALUE))

    def test_rejects_small_sizes(self):
        for size in (0, 1):
            with self.subTest(size=size):
                with self.assertRaises(InvalidArgumentError):
                    generate(GammaInfo(1.0, 1.0, 1.0, 1.0), size)


class TestFit(unittest.TestCase):

    def test_recovers_brightness_and_gamma(self):
        channel = sampled_ramp(256, 0.8, 2.2)
        info = fit(GammaRamp(channel, channel, channel))
        self.assertAlmostEqual(info.brightness, 0.8, places=4)
        self.assertAlmostEqual(info.red, 2.2, places=3)
        self.assertAlmostEqual(info.green, 2.2, places=3)
        self.assertAlmostEqual(info.blue, 2.2, places=3)

    def test_per_channel_exponents(self):
        ramp = GammaRamp(
            sampled_ramp(256, 0.9, 1.0),
            sampled_ramp(256, 0.9, 1.8),
            sampled_ramp(256, 0.9, 2.4),
        )
        info = fit(ramp)
        self.assertAlmostEqual(info.brightness, 0.9, places=4)
        self.assertAlmostEqual(info.red, 1.0, places=3)
        self.assertAlmostEqual(info.green, 1.8, places=3)
        self.assertAlmostEqual(info.blue, 2.4, places=3)

    def test_clamped_ramp(self):
        channel = sampled_ramp(256, 1.5, 1.0)
        self.assertEqual(channel[-1], MAX_VALUE)
        info = fit(GammaRamp(channel, channel, channel))
        self.assertAlmostEqual(info.brightness, 1.5, places=3)
        self.assertAlmostEqual(info.red, 1.0, places=3)

    def test_linear_ramp_fits_close_to_one(self):
        channel = tuple(k * 257 for k in range(256))
        info = fit(GammaRamp(channel, channel, channel))
        self.assertAlmostEqual(info.brightness, 1.0, places=3)
        self.assertAlmostEqual(info.red, 1.0, delta=0.01)

    def test_regenerated_linear_ramp(self):
        ramp = generate(GammaInfo(1.0, 1.0, 1.0, 1.0), 256)
        info = fit(ramp)
        self.assertAlmostEqual(info.brightness, 1.0, places=3)
        self.assertAlmostEqual(info.red, 1.0, delta=0.01)

        again = generate(info, 256)
        self.assertLessEqual(max(abs(a - b) for a, b in zip(again.red, ramp.red)), 200)

    def test_regenerated_curve_inverts_gamma(self):
        # generate applies 1/g while fit reports the exponent it measures
        ramp = generate(GammaInfo(1.0, 2.2, 2.2, 2.2), 256)
        info = fit(ramp)
        self.assertAlmostEqual(info.brightness, 1.0, places=3)
        for gamma in (info.red, info.green, info.blue):
            self.assertAlmostEqual(gamma, 1 / 2.2, delta=0.01)

        again = generate(info, 256)
        self.assertLess(again.red[128], ramp.red[128] - 25000)

    def test_black_ramp(self):
        channel = (0,) * 256
        info = fit(GammaRamp(channel, channel, channel))
        self.assertEqual(info, GammaInfo(0.0, 1.0, 1.0, 1.0))

    def test_rejects_malformed(self):
        with self.assertRaises(InvalidArgumentError):
            fit(GammaRamp((0,), (0,), (0,)))

    def test_str(self):
        self.assertEqual(str(GammaInfo(0.5, 1.0, 2.2, 1.0)),
                         "brightness: 0.50, gamma: 1.00:2.20:1.00")
        self.assertEqual(GammaInfo(0.5, 1.0, 2.2, 1.0).with_brightness(0.7).brightness, 0.7)


if __name__ == '__main__':
    unittest.main()
