"""Errors raised while compiling requests and parsing engine responses."""

from __future__ import annotations


class CompileError(ValueError):
    """Base class for errors that abort compilation of a search request."""


class InvalidFilterFieldError(CompileError):
    """A condition references a field that is neither indexed nor reserved."""


class MissingOperatorError(CompileError):
    """A condition has no operator."""


class UnsupportedOperatorError(CompileError):
    """A condition operator is unknown or cannot take the given value."""


class InvalidConjunctionError(CompileError):
    """A group conjunction is something other than AND or OR."""


class ResponseParseError(ValueError):
    """The engine response does not have the expected shape."""


class SearchExecutionError(RuntimeError):
    """The execution layer failed to run a compiled query."""
