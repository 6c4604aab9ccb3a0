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
"""Common variables, commands, fixtures & functions used in tests"""

# Local imports
from esctrace.parser import ESCParser

reset_defaults = b"\x1bc"  # ESC c
double_width = b"\x0e"  # SO
single_width = b"\x0f"  # SI
carriage_return = b"\r"  # CR

SIXEL_START = "\x1bPq"
SIXEL_END = "\x1b\\"
EMPTY_IMAGE = SIXEL_START + SIXEL_END


def sixel(body: str) -> str:
    """Wrap the given sixel data"""
    return SIXEL_START + body + SIXEL_END


def parse(code: bytes, **kwargs) -> tuple[str, str, ESCParser]:
    """Parse the given code and split the output

    :return: The trace (without the final image), the final image,
        and the parser.
    """
    escparser = ESCParser(code, **kwargs)
    output = escparser.output.getvalue().decode("utf8")

    # The output ends with: "\n" final image "\n"
    assert output.endswith("\n")
    trace, final_image, _ = output.rsplit("\n", 2)
    return trace, final_image, escparser


def escape(cmd: str, description: str) -> str:
    """Get the expected trace of an ESC command"""
    return f'\n<Escape {cmd}:"{description}">'
