"""astgen/naming.py – Dispatch method name derivation.

Base type identifiers end with a fixed category suffix (``AST`` by
convention). The dispatch method for ``ExpressionAST`` is
``acceptExpression``: the prefix word, then the identifier with its
first character upper-cased and the suffix removed.
"""

from __future__ import annotations

from astgen.errors import NamingError

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_SUFFIX",
    "dispatch_method_name",
    "strip_suffix",
]

DEFAULT_PREFIX = "accept"
DEFAULT_SUFFIX = "AST"


def strip_suffix(identifier: str, suffix: str = DEFAULT_SUFFIX, *, strict: bool = True) -> str:
    """Remove *suffix* from *identifier*.

    Precondition: *identifier* ends with *suffix* and is longer than it.
    With ``strict`` a violation raises :class:`NamingError`; otherwise the
    identifier is returned whole.
    """
    if identifier.endswith(suffix) and len(identifier) > len(suffix):
        return identifier[: len(identifier) - len(suffix)] if suffix else identifier
    if strict:
        raise NamingError(
            f"base type {identifier!r} does not end with the {suffix!r} suffix",
            identifier=identifier,
            hint=f"rename the type to '{identifier}{suffix}' or pass --no-strict-suffix",
        )
    return identifier


def dispatch_method_name(
    identifier: str,
    prefix: str = DEFAULT_PREFIX,
    suffix: str = DEFAULT_SUFFIX,
    *,
    strict: bool = True,
) -> str:
    """Return the dispatch method name for base type *identifier*.

    >>> dispatch_method_name("ExpressionAST")
    'acceptExpression'
    >>> dispatch_method_name("nestedNameSpecifierAST")
    'acceptNestedNameSpecifier'
    """
    if not identifier:
        raise NamingError("empty base type identifier")
    stem = strip_suffix(identifier, suffix, strict=strict)
    return prefix + stem[0].upper() + stem[1:]
