from __future__ import annotations

import logging
from typing import Tuple

from colorcorner.engine.buffer import PixelBuffer
from colorcorner.engine.errors import OutOfBoundsError


logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


def _table(predicate) -> bytes:
    return bytes(1 if predicate(value) else 0 for value in range(256))


def _plane(pixels: bytearray, channel: int, table: bytes) -> int:
    # One byte per pixel, 0 or 1, packed into an int for bitwise combining.
    return int.from_bytes(bytes(pixels[channel::4]).translate(table), "big")


def candidate_mask(pixels: bytearray, seed: Color, fill_color: Color, tolerance: int) -> bytearray:
    """One byte per pixel, 1 where the pixel may join the fill region."""
    count = len(pixels) // 4
    near = -1
    same = -1
    for channel in range(3):
        seed_value = seed[channel]
        fill_value = fill_color[channel]
        near &= _plane(pixels, channel, _table(lambda v: abs(v - seed_value) <= tolerance))
        same &= _plane(pixels, channel, _table(lambda v: v == fill_value))
    opaque = _plane(pixels, 3, _table(lambda v: v != 0))
    return bytearray((near & opaque & ~same).to_bytes(count, "big"))


def flood_fill(buffer: PixelBuffer, seed_x: int, seed_y: int, fill_color: Color, tolerance: int) -> int:
    """Recolor the 4-connected region around the seed, returning the pixel count.

    A pixel joins the region when every RGB channel is within ``tolerance``
    of the seed pixel. Fully transparent pixels other than the seed, and
    pixels that already have the fill color, are never part of the region.
    Filled pixels become opaque.
    """
    if not buffer.contains(seed_x, seed_y):
        raise OutOfBoundsError(seed_x, seed_y, buffer.size)

    width, height = buffer.size
    pixels = bytearray(buffer.read_bytes())
    seed_index = seed_y * width + seed_x
    seed = tuple(pixels[seed_index * 4:seed_index * 4 + 3])
    fill_color = (fill_color[0], fill_color[1], fill_color[2])
    if seed == fill_color:
        logger.debug("Seed (%d, %d) already has the fill color", seed_x, seed_y)
        return 0

    # Cleared as spans are filled, so it doubles as the visited map.
    mask = candidate_mask(pixels, seed, fill_color, tolerance)
    mask[seed_index] = 1
    count = width * height
    replacement = bytes((fill_color[0], fill_color[1], fill_color[2], 255))
    stack = [seed_index]
    filled = 0
    while stack:
        index = stack.pop()
        if not mask[index]:
            continue
        row = index - index % width
        left = mask.rfind(0, row, index) + 1 or row
        right = mask.find(0, index, row + width)
        if right == -1:
            right = row + width
        span = right - left
        mask[left:right] = bytes(span)
        pixels[left * 4:right * 4] = replacement * span
        filled += span
        for offset in (-width, width):
            start = left + offset
            stop = right + offset
            if start < 0 or stop > count:
                continue
            pos = mask.find(1, start, stop)
            while pos != -1:
                stack.append(pos)
                pos = mask.find(0, pos, stop)
                if pos == -1:
                    break
                pos = mask.find(1, pos, stop)

    if filled:
        buffer.write_bytes(bytes(pixels))
    logger.debug("Filled %d pixels from (%d, %d), tolerance %d", filled, seed_x, seed_y, tolerance)
    return filled
