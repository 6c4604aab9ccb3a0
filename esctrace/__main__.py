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
"""EscTrace entry point"""

# Standard imports
import argparse
from pathlib import Path
import shutil

# Custom imports
from esctrace import __version__
from esctrace.config_parser import (
    load_config,
    build_parser_params,
    check_raster_image,
)
from esctrace.parser import ESCParser
from esctrace.reader import ListFormatError
import esctrace.commons as cm
from esctrace.commons import CONFIG_FILES, USER_CONFIG_FILE, EMBEDDED_CONFIG_FILE

LOGGER = cm.logger()


def choose_config_file(config_file: [Path | None]) -> Path:
    """Get an existing configuration file

    Search the config file in the current directory, then in `~/.local/share/esctrace`.
    If none has been found: create a config file from the embedded one, in the
    user configuration folder and use it.
    The filename is defined in :meth:`esctrace.commons.CONFIG_FILENAME`.

    :param config_file: Configuration file path from the cli. Can be None if the
        argument is not used.
    :return: A Path for a valid configuration file, ready to be loaded in the
        ConfigParser.
    """
    if isinstance(config_file, Path):
        # Config file from command line
        if not config_file.exists():
            LOGGER.critical("Configuration file <%s> not found!", config_file)
            raise SystemExit(1)
        return config_file

    # Search the config file in the current directory, then in ~/.local/share/
    g = [path for path in CONFIG_FILES if path.exists()]
    if not g:
        # If none has been found: create the config file from the embedded one
        LOGGER.info("Initialize new default config at <%s>", USER_CONFIG_FILE)
        USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(EMBEDDED_CONFIG_FILE, USER_CONFIG_FILE)
        return USER_CONFIG_FILE
    else:
        # Use the first file found
        config_file = g[0]
        LOGGER.info("Use config at <%s>", config_file)
        return config_file


def esctrace_entry_point(**kwargs):
    """The main routine.

    The trace is written while the input is read; the end of the input
    is the normal end of the program.
    Malformed tab lists and read errors abort the program with a non-zero
    exit code.
    """
    # Parse the config file
    config = load_config(config_file=kwargs["config"])

    # Command line settings take precedence over the config file
    params = build_parser_params(config)
    params.update(kwargs)

    if params["glyphs_path"]:
        Path(params["glyphs_path"]).mkdir(parents=True, exist_ok=True)
    if params["raster_image"]:
        check_raster_image(params["raster_image"])

    LOGGER.info("EscTrace start; %s", __version__)
    try:
        ESCParser(
            kwargs["esc_prn"],
            output_file=kwargs["output"],
            **params,
        )
    except ListFormatError as exc:
        LOGGER.critical("Malformed number list: %s", exc)
        raise SystemExit(1) from exc
    except OSError as exc:
        LOGGER.critical("I/O error: %s", exc)
        raise SystemExit(1) from exc


def args_to_params(args):  # pragma: no cover
    """Return argparse namespace as a dict {variable name: value}"""
    return dict(vars(args).items())


def main():  # pragma: no cover
    """Entry point and argument parser"""
    parser = argparse.ArgumentParser(
        prog="esctrace",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "esc_prn",
        nargs="?",
        help="ImageWriter raw printer file. - to read from stdin.",
        type=argparse.FileType("rb"),
        default="-",
    )

    parser.add_argument(
        "-o",
        "--output",
        help="Trace output file. - to write on stdout.",
        type=argparse.FileType("wb"),
        default="-",
    )

    parser.add_argument(
        "-c",
        "--config",
        nargs="?",
        help="Configuration file to use. "
            "(default: ./esctrace.conf, ~/.local/share/esctrace/esctrace.conf)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=Path,
    )

    parser.add_argument(
        "--glyphs_path",
        nargs="?",
        help="Directory where user-defined characters are saved as PNG images. "
            "(default: disabled)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=Path,
    )

    parser.add_argument(
        "--raster_image",
        nargs="?",
        help="PNG file where the composite image of the graphic lines is saved. "
            "(default: disabled)",
        default=argparse.SUPPRESS,  # Absent by default (handled later)
        type=Path,
    )

    parser.add_argument(
        "-v", "--version", action="version", version=__version__
    )

    # Get program args and launch associated command
    args = parser.parse_args()

    params = args_to_params(args)

    # Handle configuration file
    params["config"] = choose_config_file(params.get("config"))

    # Do magic
    esctrace_entry_point(**params)


if __name__ == "__main__":  # pragma: no cover
    main()
