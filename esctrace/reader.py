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
"""Primitive tokens pulled from the printer data bytestream"""
# Standard imports
import io


class EndOfInput(Exception):
    """The input stream is exhausted

    This is not an error: it is the signal used to flush the accumulated
    graphics and to terminate the run successfully.
    """


class ListFormatError(ValueError):
    """A number list separator is neither ',' nor '.'"""


class StreamReader:
    """Read bytes, numbers and lists of numbers from a binary stream

    Bytes are pulled one at a time; a blocking stream (pipe, tty) is thus
    consumed as soon as data is available.
    """

    def __init__(self, stream):
        """

        :param stream: Binary stream or bytes to be read.
        :type stream: typing.BinaryIO | bytes | bytearray
        """
        if isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(stream)
        self.stream = stream
        # Number of bytes consumed so far
        self.position = 0

    def read_byte(self) -> int:
        """Get the next byte of the stream

        :raise EndOfInput: When no more byte is available.
        """
        data = self.stream.read(1)
        if not data:
            raise EndOfInput(self.position)
        self.position += 1
        return data[0]

    def read_fixed_number(self, width: int) -> int:
        """Read a decimal number written with exactly `width` ASCII digits

        Digits are not checked: any other byte just alters the value.

        Example: width 3, b"007" => 7
        """
        number = 0
        for _ in range(width):
            number = number * 10 + self.read_byte() - ord("0")
        return number

    def read_number_list(self, width: int) -> list[int]:
        """Read fixed width numbers separated by ',' and terminated by '.'

        Example: width 3, b"001,002,003." => [1, 2, 3]

        :raise ListFormatError: If a separator is neither ',' nor '.'.
        """
        numbers = []
        while True:
            numbers.append(self.read_fixed_number(width))
            separator = self.read_byte()
            if separator == ord("."):
                return numbers
            if separator != ord(","):
                raise ListFormatError(
                    f"Bad list separator {separator:#04x} at byte {self.position}"
                )

    def read_bytes(self, count: int) -> bytes:
        """Read exactly `count` bytes"""
        return bytes(self.read_byte() for _ in range(count))
