"""Logging utilities.

Contains rpmfetch's root logger, shared by every module in the package.
"""

__all__ = ("logger",)

import logging

# Make sure something handles messages sent to our non-root logger. If the
# root logger already has handlers this is a noop.
logging.basicConfig()

logger = logging.getLogger('rpmfetch')
