# astgen/errors.py
"""
astgen Error Types

Error infrastructure for the visitor generator pipeline. Every error
raised by the package derives from :class:`AstgenError` and carries a
structured :class:`ErrorCode` so the CLI can report it uniformly.

Error Hierarchy:
────────────────
    AstgenError (base)
    ├── SchemaError         - Schema could not be loaded
    │   └── SchemaSyntaxError - Schema text failed to parse
    ├── ShapeError          - Node grouping is not well formed
    ├── NamingError         - Base type identifier breaks the suffix rule
    └── WriteError          - Artifact could not be persisted

Error Codes:
────────────
Codes follow the pattern AGEN-NNNN:
  - 1000-1999: Schema loading errors
  - 2000-2999: Grouping errors
  - 3000-3999: Emission errors
  - 4000-4999: Output errors
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """Generation phase where the error occurred."""

    LOAD = "load"          # Schema loading / parsing
    GROUP = "group"        # Node grouping
    EMIT = "emit"          # Declaration emission
    WRITE = "write"        # Artifact persistence


@unique
class ErrorCategory(Enum):
    """Fine-grained error categories."""

    # Load
    INVALID_SCHEMA = auto()
    SCHEMA_SYNTAX = auto()
    UNKNOWN_MEMBER_KIND = auto()

    # Group
    MALFORMED_GROUPING = auto()
    DUPLICATE_GROUP = auto()
    MISPLACED_NODE = auto()

    # Emit
    INVALID_BASE_NAME = auto()

    # Write
    IO_FAILURE = auto()


class ErrorCode:
    """
    Structured error code of the form ``AGEN-NNNN``.
    """

    __slots__ = ("prefix", "number", "category", "phase")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        phase: ErrorPhase,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class AstgenErrorCodes:
    """Predefined error codes."""

    INVALID_SCHEMA = ErrorCode(
        "AGEN", 1000, ErrorCategory.INVALID_SCHEMA, ErrorPhase.LOAD
    )
    SCHEMA_SYNTAX = ErrorCode(
        "AGEN", 1001, ErrorCategory.SCHEMA_SYNTAX, ErrorPhase.LOAD
    )
    UNKNOWN_MEMBER_KIND = ErrorCode(
        "AGEN", 1002, ErrorCategory.UNKNOWN_MEMBER_KIND, ErrorPhase.LOAD
    )

    MALFORMED_GROUPING = ErrorCode(
        "AGEN", 2000, ErrorCategory.MALFORMED_GROUPING, ErrorPhase.GROUP
    )
    DUPLICATE_GROUP = ErrorCode(
        "AGEN", 2001, ErrorCategory.DUPLICATE_GROUP, ErrorPhase.GROUP
    )
    MISPLACED_NODE = ErrorCode(
        "AGEN", 2002, ErrorCategory.MISPLACED_NODE, ErrorPhase.GROUP
    )

    INVALID_BASE_NAME = ErrorCode(
        "AGEN", 3000, ErrorCategory.INVALID_BASE_NAME, ErrorPhase.EMIT
    )

    IO_FAILURE = ErrorCode(
        "AGEN", 4000, ErrorCategory.IO_FAILURE, ErrorPhase.WRITE
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE SPANS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceSpan:
    """A position in a schema source file."""

    file: str = ""
    line: int = 0
    column: int = 0

    @classmethod
    def from_offset(cls, text: str, offset: int, file: str = "") -> "SourceSpan":
        """Compute a 1-based line/column from a character offset into *text*."""
        offset = max(0, min(offset, len(text)))
        line = text.count("\n", 0, offset) + 1
        column = offset - (text.rfind("\n", 0, offset) + 1) + 1
        return cls(file=file, line=line, column=column)

    def __bool__(self) -> bool:
        return bool(self.file) or self.line > 0

    def __str__(self) -> str:
        file = self.file or "<schema>"
        if self.line:
            return f"{file}:{self.line}:{self.column}"
        return file


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class AstgenError(Exception):
    """
    Base exception for all astgen errors.

    Carries an :class:`ErrorCode`, an optional :class:`SourceSpan` and an
    optional hint shown by the CLI.
    """

    default_code: ErrorCode = AstgenErrorCodes.INVALID_SCHEMA

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        cause: Optional[Exception] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.span = span or SourceSpan()
        self.cause = cause
        self.hint = hint

    @property
    def phase(self) -> ErrorPhase:
        return self.code.phase

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        prefix = f"{self.span}: " if self.span else ""
        text = f"{prefix}error: {self.message} [{self.code}]"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.code,
            "phase": self.phase.value,
            "message": self.message,
            "file": self.span.file,
            "line": self.span.line,
            "column": self.span.column,
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ───────────────────────────────────────────────────────────────────────────────
# SCHEMA ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SchemaError(AstgenError):
    """The schema could not be turned into node definitions."""

    default_code = AstgenErrorCodes.INVALID_SCHEMA


class SchemaSyntaxError(SchemaError):
    """The schema text does not parse."""

    default_code = AstgenErrorCodes.SCHEMA_SYNTAX


# ───────────────────────────────────────────────────────────────────────────────
# GENERATION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ShapeError(AstgenError):
    """
    The node grouping handed to the emitter is not a well-formed ordered
    collection of groups.

    This is a contract violation inside the generator, not a condition
    to recover from: the generation call is aborted.
    """

    default_code = AstgenErrorCodes.MALFORMED_GROUPING


class NamingError(AstgenError):
    """A base type identifier does not carry the expected suffix."""

    default_code = AstgenErrorCodes.INVALID_BASE_NAME

    def __init__(self, message: str, identifier: str = "", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.identifier = identifier


class WriteError(AstgenError):
    """The generated artifact could not be persisted."""

    default_code = AstgenErrorCodes.IO_FAILURE
