"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

import sys
import logging
import os

from stormgate.gateway_error import GatewayFatal
from stormgate.const import VerbosityLevel


def verbosity():
    """Return the verbosity set in the environment as integer"""
    try:
        return int(os.environ.get("STORMGATE_VERBOSE"))
    except (TypeError, ValueError):
        return VerbosityLevel.QUIET


class GatewayLogger:
    """Logger wrapper shared by all the gateway modules"""

    VERBOSE_LEVEL = 15
    logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")

    def __init__(self):
        self.logger = logging.getLogger("stormgate")
        self.raise_on_error = True
        self._setup_handlers()
        self.set_verbosity(verbosity())

    def _setup_handlers(self):
        """Configure the console handler"""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(console_handler)
        self.logger.setLevel(logging.DEBUG)

    def add_file_handler(self, filepath, level=logging.DEBUG):
        """Log to a file, typically the run report"""
        file_handler = logging.FileHandler(filepath)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        self.logger.addHandler(file_handler)
        return file_handler

    def set_verbosity(self, verbosity_level):
        """Map verbosity to logging level"""
        mapping = {
            VerbosityLevel.SUPER_QUIET: logging.ERROR,
            VerbosityLevel.QUIET: logging.WARNING,
            VerbosityLevel.MESSAGE: logging.INFO,
            VerbosityLevel.VERBOSE: self.VERBOSE_LEVEL,
            VerbosityLevel.DEBUG: logging.DEBUG,
        }
        level = mapping.get(verbosity_level, logging.INFO)
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.FileHandler
            ):
                handler.setLevel(level)

    def fatal(self, msg):
        """Log fatal error and raise or exit"""
        self.logger.error(f"ERROR: {msg}")
        if self.raise_on_error:
            raise GatewayFatal(msg)
        else:
            sys.exit(f"ERROR: {msg}")

    def warning(self, msg):
        self.logger.warning(f"WARNING: {msg}")

    def message(self, msg):
        self.logger.info(msg)

    def verbose(self, msg):
        self.logger.log(self.VERBOSE_LEVEL, msg)

    def debug(self, msg):
        self.logger.debug(msg)


# Global instance
_gateway_logger = GatewayLogger()

# Module-level interface
fatal = _gateway_logger.fatal
warning = _gateway_logger.warning
message = _gateway_logger.message
verbose = _gateway_logger.verbose
debug = _gateway_logger.debug
set_verbosity = _gateway_logger.set_verbosity
add_file_handler = _gateway_logger.add_file_handler
