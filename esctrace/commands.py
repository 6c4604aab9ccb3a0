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
"""Definition of the ImageWriter ESC commands and of their payloads

Each command identifier (the byte following ESC) is mapped to a
:class:`Command`: the shape of its payload, the width of its decimal
number(s) if any, and a description template.

Templates are formatted with the decoded payload (``value``), the
identifier itself (``cmd``), and for some payloads: the number of bytes or
repetitions (``count``), the repeated character (``char``), the CR insertion
mode (``mode``).
"""
# Standard imports
from enum import Enum
from typing import NamedTuple


class Payload(Enum):
    """Shapes of the data expected after a command identifier"""

    NONE = 0
    # Fixed width decimal number
    NUMBER = 1
    # 2 bytes, MSB first
    BITMASK = 2
    # Fixed width decimal numbers separated by ',' and terminated by '.'
    NUMBER_LIST = 3
    # 4 digits count, then count bytes
    BYTE_RUN = 4
    # 3 digits count, then count * 8 bytes
    BLOCK_RUN = 5
    # 4 digits count, then 1 byte repeated count times
    REPEATED_BYTE = 6
    # 3 digits count, then 1 character
    REPEAT_CHAR = 7
    # Custom characters definitions terminated by EOT
    PATTERN_TABLE = 8
    # 1 digit automatic CR insertion mode
    CR_MODE = 9


# Payloads that carry a raster line
GRAPHIC_PAYLOADS = frozenset(
    (Payload.BYTE_RUN, Payload.BLOCK_RUN, Payload.REPEATED_BYTE)
)


class Command(NamedTuple):
    """Static definition of a command"""

    payload: Payload
    description: str
    # Number of digits of numeric arguments
    width: int = 0


class CommandRecord(NamedTuple):
    """A decoded command: identifier + payload value"""

    cmd: int
    payload: Payload
    value: object = None


def _none(description):
    return Command(Payload.NONE, description)


def _number(width, description):
    return Command(Payload.NUMBER, description, width)


COMMANDS = {
    # Print quality
    "a": _number(1, "Print quality {value}"),
    "m": _none("Print quality 0-correspondence"),
    "M": _none("Print quality 2-near-letter"),

    # Software switches
    "Z": Command(Payload.BITMASK, "Open switches {value:016b}"),
    "D": Command(Payload.BITMASK, "Close switches {value:016b}"),

    # User-designed characters
    "-": _none("Max width of custom chars to 8 dots"),
    "+": _none("Max width of custom chars to 16 dots"),
    # Per pattern lines are added by the parser
    "I": Command(Payload.PATTERN_TABLE, "Load {count} new characters"),
    "'": _none("Switch to custom character font"),
    "*": _none("Switch to custom character font (high ASCII)"),
    "$": _none("Switch to normal font"),
    "&": _none("Map MouseText to low ASCII"),

    # Character pitch
    "n": _none("Pitch 9 cpi"),
    "N": _none("Pitch 10 cpi"),
    "E": _none("Pitch 12 cpi"),
    "e": _none("Pitch 13.4 cpi"),
    "q": _none("Pitch 15 cpi"),
    "Q": _none("Pitch 17 cpi"),
    "p": _none("Pitch 144 dpi"),
    "P": _none("Pitch 160 dpi"),

    # Proportional character spacing
    "s": _number(1, "Dot spacing to {value}"),
    **{digit: _none("Insert {cmd} dot spaces") for digit in "123456"},

    # Character attributes
    "X": _none("Start underline"),
    "Y": _none("Stop underline"),
    "!": _none("Start bold"),
    '"': _none("Stop bold"),
    "w": _none("Start half-height"),
    "W": _none("Stop half-height"),
    "x": _none("Start superscript"),
    "y": _none("Start subscript"),
    "z": _none("Stop superscript or subscript"),

    # Page formatting
    "L": _number(3, "Set left margin at column {value}"),
    # In 1/144 inch
    "H": _number(4, "Set page length to {value}/144 inches"),

    # Print head motion
    ">": _none("Unidirectional printing"),
    "<": _none("Bidirectional printing"),
    "(": Command(Payload.NUMBER_LIST, "Set tabs at {value}", 3),
    "u": _number(3, "Add tab at column {value}"),
    ")": Command(Payload.NUMBER_LIST, "Clear tabs at {value}", 3),
    "0": _none("Clear all tabs"),
    "F": _number(4, "Place print head at pixel position {value}"),

    # Paper motion
    "v": _none("Set top of file"),
    "A": _none("6 lines per inch"),
    "B": _none("8 lines per inch"),
    # In 1/144 inch
    "T": _number(2, "Distance between lines {value}/144 inches"),
    "f": _none("Forward line feeding"),
    "r": _none("Reverse line feeding"),
    "O": _none("Paper-out sensor off"),
    "o": _none("Paper-out sensor on"),

    # Automatic CR and LF; see CR_INSERTION_MODES
    "l": Command(Payload.CR_MODE, "{mode}", 1),

    # Graphics
    "G": Command(Payload.BYTE_RUN, "Graphic line, {count} bytes", 4),
    "S": Command(Payload.BYTE_RUN, "Graphic line, {count} bytes", 4),
    "g": Command(Payload.BLOCK_RUN, "Graphic line, {count} bytes", 3),
    "V": Command(Payload.REPEATED_BYTE, "Graphic line, {count} times", 4),

    # Color printing
    "K": _number(1, "Set color {value}"),

    # Miscellaneous
    "R": Command(Payload.REPEAT_CHAR, "Repeat char '{char}', {count} times", 3),
    "c": _none("Reset defaults"),
    "?": _none("Send ID string"),
}

# Keys are bytes values
COMMANDS = {ord(cmd): command for cmd, command in COMMANDS.items()}

UNKNOWN_COMMAND = _none("Unknown")

CR_INSERTION_MODES = {
    # Digits characters: the 1 digit number read is compared with their codes
    ord("0"): "No CR insertion before LF and FF",
    ord("1"): "Insert CR before LF and DD",
}
CR_INSERTION_UNDEFINED = "CR insertion undefined"
