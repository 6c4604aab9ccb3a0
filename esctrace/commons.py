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
"""Logger settings and project constants"""

# Standard imports
from logging.handlers import RotatingFileHandler
from pathlib import Path
import logging
import datetime as dt
import tempfile


# Paths
DIR_LOGS = tempfile.gettempdir() + "/"
CONFIG_FILENAME = "esctrace.conf"
EMBEDDED_CONFIG_FILE = Path(__file__).parent / CONFIG_FILENAME
USER_CONFIG_FILE = Path.home() / ".local/share/esctrace" / CONFIG_FILENAME
# Search order: current directory, then user directory
CONFIG_FILES = (Path(CONFIG_FILENAME), USER_CONFIG_FILE)

# Control codes
ESC = 0x1B
EOT = 0x04  # CTRL-D, end of the ESC I pattern table

# Annotations displayed after some control codes
CONTROL_CODES_ANNOTATIONS = {
    0x0E: " Double width",  # SO, CTRL-N
    0x0F: " Single width",  # SI, CTRL-O
}

# Sixel
# DCS q ... ST
SIXEL_INTRODUCER = "\x1bPq"
SIXEL_TERMINATOR = "\x1b\\"
SIXEL_OFFSET = 63  # "?": no dot in the sextet
SIXEL_NEWLINE = "-"
SIXEL_BAND_HEIGHT = 6
# 6 raster lines of 8 dots are encoded in 8 sixel bands
RASTER_LINES_PER_STRIP = 6
RASTER_LINE_HEIGHT = 8

# Logging
LOGGER_NAME = "esctrace"
LOG_LEVEL = "DEBUG"

################################################################################


def logger(name=LOGGER_NAME):
    """Return logger of given name, without initialize it.

    Equivalent of logging.getLogger() call.
    """
    logger_obj = logging.getLogger(name)
    fmt_str = "%(levelname)s: [%(filename)s:%(lineno)s:%(funcName)s()] %(message)s"
    logging.basicConfig(format=fmt_str)
    return logger_obj


_logger = logging.getLogger(LOGGER_NAME)


# log file
formatter = logging.Formatter(
    "%(asctime)s :: %(levelname)s :: [%(filename)s:%(lineno)s:%(funcName)s()] :: %(message)s"
)
file_handler = RotatingFileHandler(
    DIR_LOGS
    + LOGGER_NAME
    + "_"
    + dt.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    + ".log",
    "a",
    100_000_000,
    1,
)
file_handler.setFormatter(formatter)
_logger.addHandler(file_handler)


def log_level(level):
    """Set terminal/file log level to the given one.

    .. note:: Don't forget the propagation system of messages:
        From logger to handlers. Handlers receive log messages only if
        the main logger doesn't filter them.
    """
    level = level.upper()
    if level == "NONE":
        # Override all severity levels under CRITICAL
        logging.disable()
        return
    else:
        # Remove the overriding level
        logging.disable(logging.NOTSET)
    # Main logger
    _logger.setLevel(level)
    # Handlers
    _ = [
        handler.setLevel(level)
        for handler in _logger.handlers
        if handler.__class__
        in (logging.StreamHandler, logging.handlers.RotatingFileHandler)
    ]


log_level(LOG_LEVEL)
