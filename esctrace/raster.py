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
"""Wrapper class for the graphic lines received during a print job"""

# Local imports
from esctrace.commons import logger
from esctrace.sixel import sprint_raster

LOGGER = logger()


class RasterBuffer:
    """Append-only storage of graphic lines

    Lines are kept in their arrival order, which is their vertical order
    in the printed image. A line can't be modified once added.
    """

    def __init__(self):
        self._lines = []

    def append(self, line: bytes):
        """Add a graphic line below the previous ones"""
        self._lines.append(bytes(line))
        LOGGER.debug("Raster line %d: %d bytes", len(self._lines), len(line))

    @property
    def lines(self) -> tuple[bytes, ...]:
        """Get a snapshot of the lines"""
        return tuple(self._lines)

    @property
    def width(self) -> int:
        """Get the number of columns of the widest line"""
        return max(map(len, self._lines), default=0)

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(self.lines)

    def sprint(self) -> str:
        """Get the sixel image of the whole buffer"""
        return sprint_raster(self._lines)
