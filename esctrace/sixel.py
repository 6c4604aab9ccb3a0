#  EscTrace is a software allowing to decode Apple ImageWriter printer
#  control streams into a readable trace with Sixel graphics.
#  Copyright (C) 2024-2025  Ysard
#
#  This program is free software: you can redistribute it and/or modify
#  it under the terms of the GNU Affero General Public License as published by
#  the Free Software Foundation, either version 3 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU Affero General Public License for more details.
#
#  You should have received a copy of the GNU Affero General Public License
#  along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Sixel encoding of dot patterns

A sixel character encodes 6 vertically stacked pixels (LSB at the top) as
``chr(63 + bits)``; bands of 6 pixel rows are separated by ``-``.
The image is wrapped between ``ESC P q`` and ``ESC \\``.

Can be displayed by ``xterm -ti vt340`` or mlterm.
"""
# Standard imports
from collections.abc import Iterable
from typing import NamedTuple

# Custom imports
import numpy as np

# Local imports
from esctrace.commons import (
    SIXEL_INTRODUCER,
    SIXEL_TERMINATOR,
    SIXEL_OFFSET,
    SIXEL_NEWLINE,
    SIXEL_BAND_HEIGHT,
    RASTER_LINES_PER_STRIP,
    RASTER_LINE_HEIGHT,
)

SEXTET_MASK = 0x3F


class GlyphPattern(NamedTuple):
    """User-defined character loaded with ESC I

    The cell of a character is 12 dots high; the 8 dots of each column of
    `data` are in the upper part of the cell if `top` is True,
    and shifted 1 dot down otherwise.
    """

    key: int
    top: bool
    data: bytes


def wrap_sixel(body: str) -> str:
    """Enclose the given sixel data between the DCS and ST sequences"""
    return SIXEL_INTRODUCER + body + SIXEL_TERMINATOR


def sprint_columns(columns: Iterable[int]) -> str:
    """Encode 12 dots high columns in 2 sixel bands"""
    upper_band = []
    lower_band = []
    for bits in columns:
        upper_band.append(chr((bits & SEXTET_MASK) + SIXEL_OFFSET))
        lower_band.append(chr((bits >> SIXEL_BAND_HEIGHT) + SIXEL_OFFSET))
    return wrap_sixel("".join(upper_band) + SIXEL_NEWLINE + "".join(lower_band))


def sprint_pattern(pattern: GlyphPattern) -> str:
    """Get the sixel image of a user-defined character"""
    if pattern.top:
        return sprint_columns(pattern.data)
    return sprint_columns(col << 1 for col in pattern.data)


def sprint_raster_line(data: bytes) -> str:
    """Get the sixel image of a single graphic line (8 dots high)"""
    return sprint_columns(data)


def sprint_raster(lines: Iterable[bytes]) -> str:
    """Get the sixel image of all the given graphic lines, stacked top to bottom

    Lines are grouped by 6: 6 lines of 8 dots give 48 pixel rows, i.e. exactly
    8 sixel bands. Missing lines (at the end) and missing columns (at the right
    of short lines) are blank.

    For each group and each column, the 6 bytes are packed in a 48 bits integer,
    the first line of the group in the lowest byte; sextets are then extracted
    from the lowest bits.

    :param lines: Graphic lines in printing order.
    :return: Sixel escape sequence. An empty iterable gives an empty image.
    """
    lines = list(lines)
    # Complete the last group of lines
    lines += [b""] * (-len(lines) % RASTER_LINES_PER_STRIP)
    width = max(map(len, lines), default=0)
    nb_strips = len(lines) // RASTER_LINES_PER_STRIP

    matrix = np.zeros((len(lines), width), np.uint64)
    for row, line in zip(matrix, lines):
        row[: len(line)] = np.frombuffer(line, np.uint8)

    body = []
    for strip in matrix.reshape(nb_strips, RASTER_LINES_PER_STRIP, width):
        packed = np.zeros(width, np.uint64)
        for line in strip[::-1]:
            packed = (packed << np.uint64(8)) | line

        for _ in range(RASTER_LINE_HEIGHT):
            sextets = (packed & np.uint64(SEXTET_MASK)) + np.uint64(SIXEL_OFFSET)
            body.append(sextets.astype(np.uint8).tobytes().decode("ascii"))
            body.append(SIXEL_NEWLINE)
            packed >>= np.uint64(SIXEL_BAND_HEIGHT)

    return wrap_sixel("".join(body))
