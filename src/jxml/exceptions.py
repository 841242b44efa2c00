"""JXML exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class JXMLError(Exception):
    """Base exception for JXML errors."""


# =============================================================================
# Template Exceptions
# =============================================================================


class TemplateError(JXMLError):
    """Base exception for template expansion errors."""


class BraceError(TemplateError):
    """Raised when brace nesting in a template is unbalanced.

    Attributes:
        source: The template text that failed to tokenize.
        index: Character offset of the offending brace.
        line: Zero-based line of the offending brace.
        column: Zero-based column of the offending brace.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str,
        index: int,
        line: int,
        column: int,
    ) -> None:
        """Initialize with error message and position context."""
        super().__init__(f"{message} (line {line}, col {column})")
        self.source: str = source
        self.index: int = index
        self.line: int = line
        self.column: int = column


class MalformedBraceError(BraceError):
    """A closing brace was found without a matching opening brace."""


class UnclosedBraceError(BraceError):
    """An opening brace was never closed."""


class TemplateEvaluationError(TemplateError):
    """Raised when a captured expression cannot be evaluated.

    Attributes:
        expression: The expression text (without braces) that failed.
        cause: The underlying error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and expression context."""
        super().__init__(message)
        self.expression: str = expression
        self.cause: Exception | None = cause


class ExpansionDidNotConvergeError(TemplateError):
    """Raised when fixed-point expansion exceeds its iteration limit.

    Attributes:
        iterations: Number of passes performed before giving up.
    """

    def __init__(self, message: str, *, iterations: int) -> None:
        """Initialize with error message and iteration count."""
        super().__init__(message)
        self.iterations: int = iterations


# =============================================================================
# Script Exceptions
# =============================================================================


class ScriptError(JXMLError):
    """Base exception for the expression/library script language."""


class ScriptSyntaxError(ScriptError):
    """Raised when script source cannot be parsed.

    Attributes:
        line: Zero-based line of the offending token.
        column: Zero-based column of the offending token.
    """

    def __init__(self, message: str, *, line: int, column: int) -> None:
        """Initialize with error message and position context."""
        super().__init__(f"{message} (line {line}, col {column})")
        self.line: int = line
        self.column: int = column


class ScriptRuntimeError(ScriptError):
    """Raised when evaluating a parsed script fails."""


class LibraryError(JXMLError):
    """Raised when a library script cannot be loaded or evaluated.

    Attributes:
        path: Path of the library script, if it came from a file.
        cause: The underlying error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and library context."""
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause


# =============================================================================
# Splice Exceptions
# =============================================================================


class SpliceError(JXMLError):
    """Base exception for document splicing errors."""


class MissingFixedAnchorError(SpliceError):
    """Raised when the master document lacks a fragment's insertion markers.

    Attributes:
        key: The fragment key whose anchors were looked up.
        has_start: Whether the start anchor was present.
        has_end: Whether the end anchor was present.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str,
        has_start: bool,
        has_end: bool,
    ) -> None:
        """Initialize with error message and anchor context."""
        super().__init__(message)
        self.key: str = key
        self.has_start: bool = has_start
        self.has_end: bool = has_end


# =============================================================================
# Build Exceptions
# =============================================================================


class BuildError(JXMLError):
    """Base exception for build pipeline IO errors."""


class MissingSourceFileError(BuildError):
    """Raised when a referenced input cannot be read.

    Attributes:
        path: The path that could not be read.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: Path = path


class WriteFailureError(BuildError):
    """Raised when an output cannot be persisted.

    Attributes:
        path: The path that could not be written.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        """Initialize with error message and path context."""
        super().__init__(message)
        self.path: Path = path


class XmlFormatError(JXMLError):
    """Raised when text cannot be parsed as XML for canonical formatting.

    Attributes:
        line: One-based line reported by the XML parser, if known.
        column: Column reported by the XML parser, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.line: int | None = line
        self.column: int | None = column


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(JXMLError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
