# -----------------------------------------------------------------------------
# sdkmigrator - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of sdkmigrator.
#
# sdkmigrator is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------


"""
Custom exception hierarchy for the sdkmigrator CLI application.

Every error raised while migrating a single file is local to that file:
the pipeline records it and moves on to the next one. Errors raised while
validating user input or configuration abort the whole command.
"""

import functools

import typer
from loguru import logger


class sdkmigratorError(Exception):
    """
    Base exception for all sdkmigrator-related errors.

    All sdkmigrator-specific exceptions should inherit from this class
    to enable consistent error handling throughout the application.
    """

    def __init__(self, message: str, details: str = None):
        """
        Initialize a sdkmigratorError.

        Args:
            message: Main error message for the user
            details: Additional technical details for logging
        """
        self.message = message
        self.details = details
        super().__init__(message)


class ParseError(sdkmigratorError):
    """
    Source text is not valid syntax for the target grammar.

    The file is skipped and reported as failed.
    """

    pass


class OverlappingEditError(sdkmigratorError):
    """
    Two planned edits for the same file intersect.

    The whole commit for that file is aborted; no edit is applied and the
    file is reported as not migrated so it can be reviewed by hand.
    """

    pass


class ValidationError(sdkmigratorError):
    """
    Input validation errors.

    Raised when user input fails validation checks,
    such as a missing directory or an unknown language.
    """

    pass


class ConfigurationError(sdkmigratorError):
    """
    Configuration-related errors.

    Raised when configuration files are invalid or when the requested
    migration, language and typing mode do not name a known variant.
    """

    pass


class FileSystemError(sdkmigratorError):
    """
    File system operation errors.

    Raised when a source file cannot be read, decoded or written back.
    """

    pass


# Convenience functions for creating common errors
def unsupported_variant(migration: str, language: str, typing_mode: str) -> ConfigurationError:
    """Create a ConfigurationError for a migration/language/mode with no strategy."""
    return ConfigurationError(
        f'No migration called "{migration}" found for "{language}" in "{typing_mode}" mode',
        "Run 'sdk-migrator migrate --help' to see the supported languages and migrations",
    )


def directory_not_found(path: str) -> ValidationError:
    """Create a ValidationError for a directory that does not exist."""
    return ValidationError(
        f"Directory not found: {path}",
        "Please check that the path exists and is a directory",
    )


def invalid_type_pattern(pattern: str, reason: str) -> ConfigurationError:
    """Create a ConfigurationError for a client type pattern that is not a valid regex."""
    return ConfigurationError(
        f"Invalid client type pattern: {pattern}",
        reason,
    )


def handle_sdkmigrator_exception(func):
    """Report sdkmigratorError to the user and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except sdkmigratorError as e:
            logger.error(f"[red]Error:[/red] {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
            raise typer.Exit(1) from e

    return wrapper
