"""
Failures that end a plugin run before a report can be evaluated.

None of them are retried. The CLI turns each into a verdict:
ConfigurationError and ModeError are UNKNOWN, FetchError is CRITICAL with
--critical-on-error and UNKNOWN otherwise.
"""

from __future__ import annotations


class CheckConsulError(Exception):
    """Base class for all plugin run failures."""


class ConfigurationError(CheckConsulError):
    """A parameter required by the selected mode is missing."""


class ModeError(CheckConsulError):
    """The mode selector is empty or not one of the known modes."""


class FetchError(CheckConsulError):
    """Consul could not be reached or returned an unusable answer.

    ``detail`` carries the underlying error text, printed only in verbose mode.
    """

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
