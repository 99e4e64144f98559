#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the ltxtree library.

This module defines specialized exception classes for the error conditions
that can occur while reading LaTeX source, building the expression tree and
running the rewrite passes.

Exception Hierarchy
-------------------
- LtxTreeError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class passed to the API)

  - ParsingError (reader and tree builder failures)
    - LexError (unterminated brace, math, option or verbatim span)

  - ResourceError (imports, bibliography and graphics files)
    - MissingResourceError (file doesn't exist or can't be read)

  - TransformError (fatal structural anomaly inside a rewrite pass)

  - ArgumentShapeError (command has fewer argument groups than expected)

  - UnresolvedReferenceError (label lookup failed)

  - ConversionTimeoutError (worker exceeded its time budget)

"""

from typing import Any


class LtxTreeError(Exception):
    """Base exception class for all ltxtree-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(LtxTreeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong type is supplied.

    Parameters
    ----------
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"Expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(LtxTreeError):
    """Exception raised when LaTeX source cannot be turned into a tree.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage of parsing where the error occurred (e.g. "reader", "builder")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class LexError(ParsingError):
    """Exception raised when a delimited span reaches the end of input.

    Parameters
    ----------
    construct : str
        Name of the unterminated construct (e.g. ``"{"``, ``"$$"``, ``"verbatim"``)
    line : int
        1-based source line where the construct was opened
    source_path : str, optional
        File being read, when the text came from a file

    Examples
    --------
    >>> err = LexError("{", 12)
    >>> str(err)
    "Unterminated '{' starting at line 12"

    """

    def __init__(self, construct: str, line: int, source_path: str | None = None):
        """Initialize the lex error with the construct and its position."""
        location = f"line {line}" if source_path is None else f"{source_path}:{line}"
        message = f"Unterminated '{construct}' starting at {location}"
        super().__init__(message, parsing_stage="reader")
        self.construct = construct
        self.line = line
        self.source_path = source_path


class ResourceError(LtxTreeError):
    """Base exception for external files referenced by the document.

    Parameters
    ----------
    message : str
        Description of the resource error
    resource_path : str, optional
        Path of the resource that failed
    resource_kind : str, optional
        What the resource is used for (``"import"``, ``"bibliography"``, ``"graphics"``)

    """

    def __init__(
        self,
        message: str,
        resource_path: str | None = None,
        resource_kind: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the resource error with path and kind."""
        super().__init__(message, original_error=original_error)
        self.resource_path = resource_path
        self.resource_kind = resource_kind


class MissingResourceError(ResourceError):
    """Exception raised when a referenced file doesn't exist or can't be read."""

    def __init__(self, resource_path: str, resource_kind: str, original_error: Exception | None = None):
        """Initialize the missing resource error."""
        message = f"Cannot read {resource_kind} file: {resource_path}"
        super().__init__(
            message, resource_path=resource_path, resource_kind=resource_kind, original_error=original_error
        )


class TransformError(LtxTreeError):
    """Exception raised when a rewrite pass meets a tree it cannot reshape.

    Parameters
    ----------
    message : str
        Description of the anomaly
    transform_name : str, optional
        Name of the pass that failed

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error with pass name."""
        super().__init__(message, original_error=original_error)
        self.transform_name = transform_name


class ArgumentShapeError(LtxTreeError):
    """Exception raised when a command carries fewer argument groups than it expects.

    This error is contained per node: callers turn it into an inline
    diagnostic with :func:`ltxtree.ast.utils.describe_argument_shape`.

    Parameters
    ----------
    command : str
        Command name without the leading backslash
    expected : int
        Number of argument groups the command takes
    actual : int
        Number of argument groups that were parsed

    """

    def __init__(self, command: str, expected: int, actual: int):
        """Initialize the argument shape error."""
        message = f"Command \\{command} expects {expected} argument group(s), got {actual}"
        super().__init__(message)
        self.command = command
        self.expected = expected
        self.actual = actual


class UnresolvedReferenceError(LtxTreeError):
    """Exception raised when a label is looked up but was never defined."""

    def __init__(self, label: str):
        """Initialize the unresolved reference error."""
        super().__init__(f"Undefined label: {label!r}")
        self.label = label


class ConversionTimeoutError(LtxTreeError):
    """Exception raised when a conversion exceeds its time budget."""

    def __init__(self, timeout: float, source: str | None = None):
        """Initialize the timeout error."""
        target = f" for {source}" if source else ""
        super().__init__(f"Conversion{target} did not finish within {timeout:g} seconds")
        self.timeout = timeout
        self.source = source

