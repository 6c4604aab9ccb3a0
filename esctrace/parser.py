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
"""Main ESC parser routines used to build the trace of a print job"""
# Standard imports
import io

# Local imports
from esctrace.commons import logger, ESC, EOT, CONTROL_CODES_ANNOTATIONS
from esctrace.commands import (
    COMMANDS,
    UNKNOWN_COMMAND,
    CR_INSERTION_MODES,
    CR_INSERTION_UNDEFINED,
    GRAPHIC_PAYLOADS,
    CommandRecord,
    Payload,
)
from esctrace.images import save_glyph, save_raster
from esctrace.raster import RasterBuffer
from esctrace.reader import StreamReader, EndOfInput
from esctrace.sixel import GlyphPattern, sprint_pattern, sprint_raster_line

LOGGER = logger()


class ESCParser:
    """Parser routines used to decode ImageWriter bytecode

    Every byte of the input is reported in the output:

    - printable bytes as ``{hh}``,
    - control codes as ``{hh:^X}`` on a new line,
    - ESC commands as ``<Escape X:"description">`` on a new line.

    Graphic lines and user-defined characters are followed by their Sixel
    image. At the end of the input, all the graphic lines received are
    rendered in a single Sixel image.
    """

    def __init__(
        self,
        code,
        output_file=None,
        raster_buffer=None,
        glyphs_path=None,
        raster_image=None,
        **_,
    ):
        """

        :param code: Binary code to be parsed.
        :key output_file: Binary stream of the trace.
            (default: None, in-memory stream available in the `output` attribute).
        :key raster_buffer: Storage of the graphic lines. (default: None, a new
            empty buffer is used).
        :key glyphs_path: Directory where user-defined characters are saved as
            PNG images. (default: None, disabled).
        :key raster_image: PNG filepath of the final composite image of the
            graphic lines. (default: None, disabled).
        :type code: bytes | bytearray | typing.BinaryIO
        :type output_file: typing.BinaryIO | None
        :type raster_buffer: RasterBuffer | None
        :type glyphs_path: str | Path | None
        :type raster_image: str | Path | None
        """
        self.reader = StreamReader(code)

        # In-memory output by default (tests)
        self.output = io.BytesIO() if output_file is None else output_file

        self.raster_buffer = RasterBuffer() if raster_buffer is None else raster_buffer
        self.glyphs_path = glyphs_path
        self.raster_image = raster_image

        # Parse it !
        self.run_escp()

    def write(self, text: str):
        """Send text to the output stream"""
        self.output.write(text.encode("utf8"))

    def read_escape_sequence(self) -> str:
        """Decode the command following an ESC byte

        The graphic line of a graphic command is added to the raster buffer.

        :return: Description of the command, followed by the Sixel image of
            its dots if any.
        """
        cmd = self.reader.read_byte()
        record = self.read_command(cmd)
        description = self.describe(record)

        if record.payload in GRAPHIC_PAYLOADS:
            description += sprint_raster_line(record.value)
            self.raster_buffer.append(record.value)

        elif record.payload == Payload.PATTERN_TABLE:
            for pattern in record.value:
                description += f"\n    Key '{chr(pattern.key)}', {len(pattern.data)} bytes"
                description += sprint_pattern(pattern)
                if self.glyphs_path:
                    save_glyph(pattern, self.glyphs_path)

        LOGGER.debug("ESC %s: %s", chr(cmd), record.payload.name)
        return f'<Escape {chr(cmd)}:"{description}">'

    def read_command(self, cmd: int) -> CommandRecord:
        """Read the payload of the given command

        The shape of the payload depends only on the command identifier.
        Unknown commands have no payload.
        """
        command = COMMANDS.get(cmd)
        if command is None:
            LOGGER.warning(
                "Unknown command %#04x at byte %d", cmd, self.reader.position
            )
            return CommandRecord(cmd, Payload.NONE)

        reader = self.reader
        payload = command.payload
        value = None

        if payload in (Payload.NUMBER, Payload.CR_MODE):
            value = reader.read_fixed_number(command.width)

        elif payload == Payload.BITMASK:
            value = (reader.read_byte() << 8) + reader.read_byte()

        elif payload == Payload.NUMBER_LIST:
            value = reader.read_number_list(command.width)

        elif payload == Payload.BYTE_RUN:
            value = reader.read_bytes(reader.read_fixed_number(command.width))

        elif payload == Payload.BLOCK_RUN:
            value = reader.read_bytes(8 * reader.read_fixed_number(command.width))

        elif payload == Payload.REPEATED_BYTE:
            count = reader.read_fixed_number(command.width)
            value = bytes((reader.read_byte(),)) * count

        elif payload == Payload.REPEAT_CHAR:
            count = reader.read_fixed_number(command.width)
            value = (count, reader.read_byte())

        elif payload == Payload.PATTERN_TABLE:
            value = self.read_patterns()

        return CommandRecord(cmd, payload, value)

    def read_patterns(self) -> list[GlyphPattern]:
        """Read user-defined characters until the EOT byte - ESC I"""
        patterns = []
        while (key := self.reader.read_byte()) != EOT:
            patterns.append(self.read_pattern(key))
        return patterns

    def read_pattern(self, key: int) -> GlyphPattern:
        """Read the width selector and the dots of a user-defined character

        The width selector gives the number of columns and the position of the
        dots in the 12 dots high cell:

        - 'A', 'B', ...: 1, 2, ... columns, dots in the upper part,
        - 'a', 'b', ...: 1, 2, ... columns, dots shifted 1 dot down.
        """
        selector = self.reader.read_byte()
        top = selector < ord("a")
        # 8 bits arithmetic, like the printer does
        width = (selector - (ord("A") if top else ord("a")) + 1) & 0xFF
        return GlyphPattern(key, top, self.reader.read_bytes(width))

    @staticmethod
    def describe(record: CommandRecord) -> str:
        """Get the human-readable description of a decoded command"""
        command = COMMANDS.get(record.cmd, UNKNOWN_COMMAND)
        value = record.value
        fields = {"cmd": chr(record.cmd), "value": value}

        if record.payload == Payload.CR_MODE:
            fields["mode"] = CR_INSERTION_MODES.get(value, CR_INSERTION_UNDEFINED)
        elif record.payload in GRAPHIC_PAYLOADS or record.payload == Payload.PATTERN_TABLE:
            fields["count"] = len(value)
        elif record.payload == Payload.REPEAT_CHAR:
            count, char = value
            fields["count"] = count
            fields["char"] = chr(char)

        return command.description.format(**fields)

    @staticmethod
    def control_code(code: int) -> str:
        """Get the trace of a control code: hex value, caret notation, annotation"""
        annotation = CONTROL_CODES_ANNOTATIONS.get(code, "")
        return f"\n{{{code:02x}:^{chr(code + 0x40)}{annotation}}}"

    def flush_raster(self):
        """Send the composite image of all the graphic lines received"""
        LOGGER.info(
            "Final image: %d graphic lines, %d columns",
            len(self.raster_buffer),
            self.raster_buffer.width,
        )
        self.write(f"\n{self.raster_buffer.sprint()}\n")
        self.output.flush()

        if self.raster_image:
            save_raster(self.raster_buffer, self.raster_image)

    def run_escp(self):
        """Parse the printer data bytestream & build the trace

        This function is the entry point of the parser.
        The end of the input stream is the normal end of the parsing; all
        other errors are propagated.

        :raise esctrace.reader.ListFormatError: On malformed tab lists.
        :raise OSError: On read errors.
        """
        reader = self.reader
        try:
            while True:
                byte = reader.read_byte()
                if byte == ESC:
                    self.write("\n" + self.read_escape_sequence())
                elif byte < 0x20:
                    self.write(self.control_code(byte))
                else:
                    self.write(f"{{{byte:02x}}}")
                # Pipes: show each byte as soon as it is decoded
                self.output.flush()
        except EndOfInput:
            LOGGER.debug("End of input at byte %d", reader.position)

        self.flush_raster()
