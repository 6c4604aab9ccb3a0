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
"""Test the decoding of commands without graphics data"""

# Custom imports
import pytest

# Local imports
from esctrace.commands import COMMANDS, Payload
from .misc import parse, escape, EMPTY_IMAGE


def test_reset_defaults():
    """ESC c has no payload"""
    trace, final_image, escparser = parse(b"\x1bc")
    assert trace == escape("c", "Reset defaults")
    assert final_image == EMPTY_IMAGE
    assert not len(escparser.raster_buffer)


@pytest.mark.parametrize(
    "cmd, description",
    [
        ("m", "Print quality 0-correspondence"),
        ("M", "Print quality 2-near-letter"),
        ("-", "Max width of custom chars to 8 dots"),
        ("+", "Max width of custom chars to 16 dots"),
        ("'", "Switch to custom character font"),
        ("*", "Switch to custom character font (high ASCII)"),
        ("$", "Switch to normal font"),
        ("&", "Map MouseText to low ASCII"),
        ("n", "Pitch 9 cpi"),
        ("N", "Pitch 10 cpi"),
        ("E", "Pitch 12 cpi"),
        ("e", "Pitch 13.4 cpi"),
        ("q", "Pitch 15 cpi"),
        ("Q", "Pitch 17 cpi"),
        ("p", "Pitch 144 dpi"),
        ("P", "Pitch 160 dpi"),
        ("1", "Insert 1 dot spaces"),
        ("6", "Insert 6 dot spaces"),
        ("X", "Start underline"),
        ("Y", "Stop underline"),
        ("!", "Start bold"),
        ('"', "Stop bold"),
        ("w", "Start half-height"),
        ("W", "Stop half-height"),
        ("x", "Start superscript"),
        ("y", "Start subscript"),
        ("z", "Stop superscript or subscript"),
        (">", "Unidirectional printing"),
        ("<", "Bidirectional printing"),
        ("0", "Clear all tabs"),
        ("v", "Set top of file"),
        ("A", "6 lines per inch"),
        ("B", "8 lines per inch"),
        ("f", "Forward line feeding"),
        ("r", "Reverse line feeding"),
        ("O", "Paper-out sensor off"),
        ("o", "Paper-out sensor on"),
        ("?", "Send ID string"),
    ],
)
def test_commands_without_payload(cmd, description):
    """The byte following the command is not consumed"""
    trace, *_ = parse(b"\x1b" + cmd.encode() + b"A")
    assert trace == escape(cmd, description) + "{41}"


@pytest.mark.parametrize(
    "code, description",
    [
        (b"a2", "Print quality 2"),
        (b"s3", "Dot spacing to 3"),
        (b"L010", "Set left margin at column 10"),
        (b"H1584", "Set page length to 1584/144 inches"),
        (b"u040", "Add tab at column 40"),
        (b"F0100", "Place print head at pixel position 100"),
        (b"T16", "Distance between lines 16/144 inches"),
        (b"K3", "Set color 3"),
    ],
    ids=[
        "print_quality",
        "dot_spacing",
        "left_margin",
        "page_length",
        "add_tab",
        "print_head_position",
        "line_spacing",
        "color",
    ],
)
def test_commands_with_number(code, description):
    """Fixed width decimal numbers"""
    trace, *_ = parse(b"\x1b" + code + b"A")
    assert trace == escape(chr(code[0]), description) + "{41}"


@pytest.mark.parametrize(
    "code, description",
    [
        # 0x60 - 0x30 = 48: code of "0"
        (b"l`", "No CR insertion before LF and FF"),
        # 0x61 - 0x30 = 49: code of "1"
        (b"la", "Insert CR before LF and DD"),
        # Digits give the numbers 0 and 1, not the codes of "0" and "1"
        (b"l0", "CR insertion undefined"),
        (b"l1", "CR insertion undefined"),
        (b"l7", "CR insertion undefined"),
    ],
    ids=["mode_0", "mode_1", "digit_0", "digit_1", "digit_7"],
)
def test_automatic_cr(code, description):
    """Automatic CR insertion modes - ESC l

    The number read is compared with the codes of the characters "0" and "1".
    """
    trace, *_ = parse(b"\x1b" + code)
    assert trace == escape("l", description)


@pytest.mark.parametrize(
    "code, description",
    [
        (b"Z\x81\x02", "Open switches 1000000100000010"),
        (b"D\x00\x01", "Close switches 0000000000000001"),
        (b"Z\xff\xff", "Open switches 1111111111111111"),
    ],
)
def test_software_switches(code, description):
    """2 bytes bitmask, the first byte is the most significant"""
    trace, *_ = parse(b"\x1b" + code)
    assert trace == escape(chr(code[0]), description)


@pytest.mark.parametrize(
    "code, description",
    [
        (b"(010,020,030.", "Set tabs at [10, 20, 30]"),
        (b"(008.", "Set tabs at [8]"),
        (b")005,100.", "Clear tabs at [5, 100]"),
    ],
)
def test_tabs(code, description):
    """Lists of 3 digits columns - ESC (, ESC )"""
    trace, *_ = parse(b"\x1b" + code + b"A")
    assert trace == escape(chr(code[0]), description) + "{41}"


@pytest.mark.parametrize(
    "code, description",
    [
        (b"R005x", "Repeat char 'x', 5 times"),
        # Bytes are displayed as latin-1 code points
        (b"R012\xe9", "Repeat char 'é', 12 times"),
    ],
)
def test_repeat_char(code, description):
    """3 digits count followed by the character - ESC R"""
    trace, _, escparser = parse(b"\x1b" + code)
    assert trace == escape("R", description)
    # Not a graphic line
    assert not len(escparser.raster_buffer)


def test_number_is_not_a_cr_mode():
    """CR insertion modes are only used by ESC l"""
    # 0x60 - 0x30 = 48, the value of the mode "No CR insertion"
    trace, *_ = parse(b"\x1ba`")
    assert trace == escape("a", "Print quality 48")


def test_unknown_command(caplog):
    """Unknown commands consume no payload and are just logged"""
    trace, *_ = parse(b"\x1bjA")
    assert trace == escape("j", "Unknown") + "{41}"
    assert "Unknown command 0x6a" in caplog.text


def test_unknown_command_desynchronization():
    """The payload of an unknown command is parsed as regular bytes"""
    # ESC @ is not an ImageWriter command: parsing resumes right after it
    trace, *_ = parse(b"\x1b@\x1bc")
    assert trace == escape("@", "Unknown") + escape("c", "Reset defaults")


def test_commands_table():
    """Sanity check of the commands definitions"""
    assert len(COMMANDS) == 62
    for cmd, command in COMMANDS.items():
        assert 0x20 < cmd < 0x7f
        if command.payload in (Payload.NUMBER, Payload.NUMBER_LIST, Payload.CR_MODE):
            assert 1 <= command.width <= 4, chr(cmd)
