"""
Exception hierarchy for ngdriver.

Every error raised by the library derives from NgDriverError. Errors that
have a natural Selenium or builtin counterpart also inherit from it, so
existing ``except TimeoutException`` or ``except TypeError`` handlers keep
working.
"""

from selenium.common.exceptions import (
    JavascriptException,
    NoSuchElementException,
    TimeoutException,
)


class NgDriverError(Exception):
    """Base class for ngdriver errors."""

    pass


class NoSuchElementError(NgDriverError, NoSuchElementException):
    """A locate call that needed one element matched none."""

    pass


class SynchronizationTimeoutError(NgDriverError, TimeoutException):
    """The page never reported itself stable within the script timeout."""

    pass


class AngularNotFoundError(NgDriverError, RuntimeError):
    """No instrumentable Angular application was found on the page."""

    pass


class ExpressionEvaluationError(NgDriverError, JavascriptException):
    """An Angular expression failed to evaluate in the page."""

    pass


class UnsupportedOperationError(NgDriverError):
    """The requested operation is not available for the detected Angular version."""

    pass


class UnsupportedDriverError(NgDriverError, TypeError):
    """The wrapped driver cannot execute scripts."""

    pass


class UnsupportedExecutionContextError(NgDriverError, TypeError):
    """A locator context offers no way to execute scripts."""

    pass


class ConfigurationError(NgDriverError):
    """Configuration loading or parsing error."""

    pass


__all__ = [
    "NgDriverError",
    "NoSuchElementError",
    "SynchronizationTimeoutError",
    "AngularNotFoundError",
    "ExpressionEvaluationError",
    "UnsupportedOperationError",
    "UnsupportedDriverError",
    "UnsupportedExecutionContextError",
    "ConfigurationError",
]
