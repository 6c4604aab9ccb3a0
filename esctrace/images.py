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
"""Export of graphic lines and user-defined characters as PNG images

Dots are black (0) on a white (0xFF) background.
"""
# Standard imports
from collections.abc import Iterable
from hashlib import md5
from pathlib import Path

# Custom imports
import numpy as np
from PIL import Image

# Local imports
from esctrace.commons import logger, RASTER_LINE_HEIGHT, SIXEL_BAND_HEIGHT
from esctrace.sixel import GlyphPattern

LOGGER = logger()

# 2 sixel bands
GLYPH_HEIGHT = 2 * SIXEL_BAND_HEIGHT


def raster_to_array(lines: Iterable[bytes]) -> np.ndarray:
    """Get the pixels of the given graphic lines stacked top to bottom

    The LSB of each byte is the top dot of its column.
    Short lines are completed with blank columns.

    :return: 2D matrix of shape (8 * number of lines, width of the widest line).
    """
    lines = list(lines)
    width = max(map(len, lines), default=0)
    matrix = np.zeros((len(lines), width), np.uint8)
    for row, line in zip(matrix, lines):
        row[: len(line)] = np.frombuffer(line, np.uint8)

    # 3D: lines, columns, dots of the column
    bits = np.unpackbits(matrix[..., np.newaxis], axis=-1, bitorder="little")
    # Pillow accepts a list of pixel rows, not a list of columns:
    # put the dots of each line before the columns, then merge lines and dots
    dots = bits.transpose(0, 2, 1).reshape(len(lines) * RASTER_LINE_HEIGHT, width)
    return np.where(dots, 0, 0xFF).astype(np.uint8)


def glyph_to_array(pattern: GlyphPattern) -> np.ndarray:
    """Get the pixels of a user-defined character in its 12 dots high cell

    :return: 2D matrix of shape (12, width of the character).
    """
    columns = np.frombuffer(pattern.data, np.uint8).astype(np.uint16)
    if not pattern.top:
        columns <<= 1
    rows = np.arange(GLYPH_HEIGHT)[:, np.newaxis]
    dots = (columns[np.newaxis, :] >> rows) & 1
    return np.where(dots, 0, 0xFF).astype(np.uint8)


def save_image(array: np.ndarray, filepath: Path | str) -> bool:
    """Save the given matrix of pixels as a grayscale image

    :return: False if the image is empty and was not saved.
    """
    if not array.size:
        LOGGER.warning("Empty image not saved: %s", filepath)
        return False
    Image.fromarray(array).save(filepath)
    LOGGER.debug("Image saved: %s (%s)", filepath, array.shape)
    return True


def save_glyph(pattern: GlyphPattern, directory: Path | str) -> Path:
    """Save a user-defined character in the given directory

    The filename contains the character code and a hash of the dots, so that
    different definitions of the same character are kept.
    """
    md5_digest = md5(pattern.data).hexdigest()[:7]
    filepath = Path(directory) / f"glyph_{pattern.key:02x}_{md5_digest}.png"
    save_image(glyph_to_array(pattern), filepath)
    return filepath


def save_raster(lines: Iterable[bytes], filepath: Path | str) -> Path:
    """Save the composite image of all the graphic lines"""
    filepath = Path(filepath)
    save_image(raster_to_array(lines), filepath)
    return filepath
