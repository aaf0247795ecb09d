"""
Gamma - Fit and regenerate CRTC gamma ramps
===========================================

A CRTC gamma ramp is three lookup tables of 16-bit values. We approximate
each table with a power function scaled by a brightness shared by the three
channels::

    v = i^g * b

so ``g = (ln(v) - ln(b)) / ln(i)``, and ``b`` follows from two samples
``(i1, v1)`` and ``(i2, v2)`` of the same channel::

    b = e^((ln(v2)*ln(i1) - ln(v1)*ln(i2)) / ln(i1/i2))

For the best resolution ``i2`` is taken at the highest unclamped entry and
``i1`` at half of it. When ``i2`` is the last entry, ``b = v2``.

The approximation is lossy: hardware ramps that do not follow the model
(night light, calibration profiles) come back only roughly. ``fit`` reports
the exponent it measures while ``generate`` applies ``1/g``, so regenerating a
fitted non-linear ramp inverts its gamma.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MAX_VALUE = 0xffff
DARK_THRESHOLD = 0.0001
EPSILON = np.finfo(np.float64).eps


@dataclass(frozen=True)
class GammaRamp:
    """Per-channel lookup tables of one CRTC."""
    red: Tuple[int, ...]
    green: Tuple[int, ...]
    blue: Tuple[int, ...]

    @classmethod
    def from_dbus(cls, result: tuple) -> 'GammaRamp':
        """Build from the ``(aqaqaq)`` reply of ``GetCrtcGamma``."""
        red, green, blue = result
        return cls(
            red=tuple(int(v) for v in red),
            green=tuple(int(v) for v in green),
            blue=tuple(int(v) for v in blue),
        )

    @property
    def size(self) -> int:
        return len(self.red)

    @property
    def channels(self) -> Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]:
        return (self.red, self.green, self.blue)

    def validate(self):
        """
        Raises:
            InvalidArgumentError: If the channels are empty or differ in length
        """
        if not (len(self.red) == len(self.green) == len(self.blue)):
            raise InvalidArgumentError(
                f"gamma channels differ in length: "
                f"{len(self.red)}/{len(self.green)}/{len(self.blue)}")
        if self.size < 2:
            raise InvalidArgumentError(f"gamma ramp needs at least 2 entries, got {self.size}")

    def serialize(self) -> Tuple[List[int], List[int], List[int]]:
        return (list(self.red), list(self.green), list(self.blue))


@dataclass(frozen=True)
class GammaInfo:
    """Brightness plus one gamma exponent per channel."""
    brightness: float
    red: float
    green: float
    blue: float

    def with_brightness(self, brightness: float) -> 'GammaInfo':
        return replace(self, brightness=brightness)

    def __str__(self) -> str:
        return (f"brightness: {self.brightness:.2f}, "
                f"gamma: {self.red:.2f}:{self.green:.2f}:{self.blue:.2f}")


def find_last_non_clamped(channel: Sequence[int]) -> int:
    """Index of the last entry below 0xffff, or 0 if every entry is clamped."""
    unclamped = np.flatnonzero(np.asarray(channel) < MAX_VALUE)
    if unclamped.size == 0:
        return 0
    return int(unclamped[-1])


def fit(ramp: GammaRamp) -> GammaInfo:
    """
    Approximate a gamma ramp with a GammaInfo.

    The reference channel is the one with the highest unclamped entry (red
    wins ties, then green). An effectively black ramp has no recoverable
    gamma and fits to brightness 0 with all exponents 1.

    Raises:
        InvalidArgumentError: If the ramp is empty or malformed
    """
    ramp.validate()
    size = ramp.size
    channels = [np.asarray(c, dtype=np.float64) for c in ramp.channels]
    lasts = [find_last_non_clamped(c) for c in channels]

    best = 0
    for index in (1, 2):
        if lasts[index] > lasts[best]:
            best = index
    reference = channels[best]
    last = max(lasts[best], 1)

    middle = last // 2
    i1 = (middle + 1) / size
    v1 = reference[middle] / MAX_VALUE
    i2 = (last + 1) / size
    v2 = reference[last] / MAX_VALUE

    if v2 < DARK_THRESHOLD:
        logger.debug("Gamma ramp is black, no gamma to recover")
        return GammaInfo(brightness=0.0, red=1.0, green=1.0, blue=1.0)

    # Zero samples give infinite logarithms; keep IEEE semantics rather than raise.
    with np.errstate(divide='ignore', invalid='ignore'):
        if last + 1 == size:
            brightness = float(v2)
        else:
            brightness = float(np.exp(
                (np.log(v2) * math.log(i1) - np.log(v1) * math.log(i2)) / math.log(i1 / i2)))

        def exponent(channel: np.ndarray, channel_last: int) -> float:
            half = channel_last // 2
            return float(np.log(channel[half] / brightness / MAX_VALUE)
                         / math.log((half + 1) / size))

        info = GammaInfo(
            brightness=brightness,
            red=exponent(channels[0], lasts[0]),
            green=exponent(channels[1], lasts[1]),
            blue=exponent(channels[2], lasts[2]),
        )
    logger.debug(f"Fitted gamma ramp of size {size}: {info}")
    return info


def _channel(domain: np.ndarray, index: np.ndarray, inverse: float, brightness: float) -> np.ndarray:
    size = domain.size
    if abs(inverse - 1.0) < EPSILON and abs(brightness - 1.0) < EPSILON:
        # Same as domain * MAX_VALUE, but exact at every index.
        values = index * MAX_VALUE / (size - 1)
    else:
        with np.errstate(divide='ignore', invalid='ignore'):
            values = np.clip(np.power(domain, inverse) * brightness, 0.0, 1.0) * MAX_VALUE
        values = np.nan_to_num(values, nan=0.0)
    return values.astype(np.uint16)


def generate(info: GammaInfo, size: int) -> GammaRamp:
    """
    Build a gamma ramp of ``size`` entries from a GammaInfo.

    Each channel is ``min(i^(1/g) * brightness, 1)`` scaled to 16 bits, for
    ``i`` evenly spaced over ``[0, 1]``. An exponent of 0 is treated as 1.

    Raises:
        InvalidArgumentError: If size is smaller than 2
    """
    if size < 2:
        raise InvalidArgumentError(f"gamma ramp needs at least 2 entries, got {size}")

    index = np.arange(size, dtype=np.float64)
    domain = index / (size - 1)

    channels = []
    for gamma in (info.red, info.green, info.blue):
        if gamma == 0.0:
            gamma = 1.0
        channel = _channel(domain, index, 1.0 / gamma, info.brightness)
        channels.append(tuple(int(v) for v in channel))

    return GammaRamp(red=channels[0], green=channels[1], blue=channels[2])
