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
"""Load configuration file, check and set default values"""

# Standard imports
from pathlib import Path
import configparser
from logging import DEBUG

# Local imports
from esctrace.commons import (
    logger,
    log_level,
    EMBEDDED_CONFIG_FILE,
    LOG_LEVEL,
)

LOGGER = logger()

LOG_LEVELS = ("debug", "info", "warning", "error", "critical", "none")


def load_config(config_file=EMBEDDED_CONFIG_FILE):
    """Load configuration file and set default settings

    :key config_file: Path of the configuration file to load.
        Default: EMBEDDED_CONFIG_FILE from commons module.
    :type config_file: Path
    :return: Configuration updated object.
    :rtype: configparser.ConfigParser
    """
    config = configparser.ConfigParser(allow_no_value=True)
    config.read(config_file)
    return parse_config(config)


def parse_config(config: configparser.ConfigParser):
    """Read config file, check and set default values

    .. note:: All values are of type string; they must be cast
        (with dedicated methods) if necessary.

        The syntax `if not xxx:` handles None and '' data retrieved from file.

    The misc section is mandatory; the images section is created if not in the
    config file.

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    :return: Processed ConfigParser object
    :rtype: configparser.ConfigParser
    """
    ## Misc section
    misc_section = config["misc"]
    loglevel = misc_section.get("loglevel")
    if not loglevel:
        misc_section["loglevel"] = loglevel = LOG_LEVEL.lower()
    if loglevel.lower() not in LOG_LEVELS:
        LOGGER.error("loglevel: expect one of %s (%s)", LOG_LEVELS, loglevel)
        raise SystemExit(1)
    log_level(loglevel)


    ## Images section
    if not config.has_section("images"):
        config.add_section("images")

    images_section = config["images"]
    # Default: images export is disabled (if not defined or empty)
    # If defined, the directory is created.
    glyphs_path = images_section.get("glyphs_path")
    if not glyphs_path:
        images_section["glyphs_path"] = ""
    elif not Path(glyphs_path).exists():
        try:
            Path(glyphs_path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.error("images: error accessing glyphs_path (%s)", glyphs_path)
            raise SystemExit(1) from exc

    raster_image = images_section.get("raster_image")
    if not raster_image:
        images_section["raster_image"] = ""
    else:
        check_raster_image(raster_image)

    debug_config_file(config)
    return config


def check_raster_image(raster_image):
    """Exit if the composite image file is not a PNG file

    :param raster_image: Path of the image; from the config file or the cli.
    :type raster_image: str | Path
    """
    if Path(raster_image).suffix.lower() != ".png":
        LOGGER.error("images: raster_image must be a .png file (%s)", raster_image)
        raise SystemExit(1)


def debug_config_file(config: configparser.ConfigParser):
    """Display sections, keys and values of config file

    :param config: Opened ConfigParser object
    :type config: configparser.ConfigParser
    """
    if LOGGER.level > DEBUG:
        return
    for section in config.sections():
        LOGGER.debug("[%s]", section)

        for key, value in config[section].items():
            LOGGER.debug("%s : %s", key, value)

        LOGGER.debug("")


def build_parser_params(config) -> dict:
    """Get dict of params that match the kwargs of ESCParser object.

    Empty settings are returned as None (feature disabled).

    :param config: Configuration object.
    :type config: configparser.ConfigParser
    """
    images_section = config["images"]
    return {
        "glyphs_path": images_section.get("glyphs_path") or None,
        "raster_image": images_section.get("raster_image") or None,
    }
