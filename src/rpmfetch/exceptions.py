"""Base rpmfetch exceptions."""

from snakeoil.cli.exceptions import UserException


class RpmfetchException(Exception):
    """Generic rpmfetch exception."""


class RpmfetchUserException(RpmfetchException, UserException):
    """Generic rpmfetch exception with a sane string for non-debug, user-facing output."""
