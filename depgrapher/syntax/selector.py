"""Syntax selector parsing.

The selector is a comma separated list of preset names and inline
definitions, for example::

    Makefile
    Makefile,Dot
    Makefile,{"GraphPrefix","EdgePrefix","SourceDelimiter","EdgeInfix","TargetDelimiter","EdgeSuffix","GraphSuffix",true}

The string is consumed in a single left-to-right scan that splits on
``, { } " '``.
"""

from __future__ import annotations

import logging
from typing import List

from depgrapher.errors import SyntaxConfigError
from depgrapher.syntax.definition import STRING_FIELD_COUNT, Syntax, lookup_preset

logger = logging.getLogger("depgrapher.syntax.selector")

_SPLIT_CHARS = ",{}\"'"
_BOOL_LITERALS = {"true": True, "false": False, "": True}


def _resolve_preset(token: str) -> List[Syntax]:
    """Expand a preset alias, raising SyntaxConfigError on unknown names."""
    try:
        return list(lookup_preset(token))
    except KeyError:
        raise SyntaxConfigError(f"Invalid syntax name: {token!r}") from None


def _parse_bool(literal: str) -> bool:
    try:
        return _BOOL_LITERALS[literal.strip().lower()]
    except KeyError:
        raise SyntaxConfigError(
            f"Expected true or false as last syntax element, got {literal!r}"
        ) from None


def parse_syntaxes(text: str) -> List[Syntax]:
    """Parse a selector string into an ordered list of syntaxes.

    Args:
        text: Selector string (preset aliases and/or inline definitions).

    Returns:
        List[Syntax]: Syntaxes in the order they appear. Composite presets
        contribute all of their shapes.

    Raises:
        SyntaxConfigError: For unknown presets, malformed brace blocks or
            characters before an opening brace.
    """
    result: List[Syntax] = []
    string_fields: List[str] = []
    in_brace = False
    after_brace = False
    start = 0
    index = 0

    while index < len(text):
        char = text[index]
        if char not in _SPLIT_CHARS:
            index += 1
            continue

        pending = text[start:index].strip()

        if char == "'":
            # single-quoted fields are reserved
            raise SyntaxConfigError(
                f"Single-quoted syntax elements are not supported (position {index})"
            )

        if char == '"':
            if not in_brace:
                raise SyntaxConfigError(
                    f"Unexpected quote outside of brackets at position {index}"
                )
            if pending:
                raise SyntaxConfigError(
                    f"Unexpected character(s) before quoted element: {pending!r}"
                )
            end = text.find('"', index + 1)
            if end < 0:
                raise SyntaxConfigError("Unterminated quoted syntax element")
            string_fields.append(text[index + 1:end])
            index = end + 1
            start = index
            continue

        if char == "{":
            if in_brace:
                raise SyntaxConfigError("Nested brackets are not allowed")
            if pending:
                raise SyntaxConfigError(
                    f"Unexpected character(s) before opening bracket: {pending!r}"
                )
            in_brace = True
            string_fields = []

        elif char == "}":
            if not in_brace:
                raise SyntaxConfigError("Closing bracket without opening bracket")
            if len(string_fields) != STRING_FIELD_COUNT:
                raise SyntaxConfigError(
                    f"Brackets didn't contain the {STRING_FIELD_COUNT} syntax elements "
                    f"(found {len(string_fields)})"
                )
            syntax = Syntax.from_fields(string_fields, _parse_bool(pending))
            logger.debug("Parsed inline syntax: %s", syntax)
            result.append(syntax)
            in_brace = False
            after_brace = True

        elif char == ",":
            if in_brace:
                if pending:
                    raise SyntaxConfigError(
                        f"Syntax elements must be quoted, got {pending!r}"
                    )
            elif after_brace:
                if pending:
                    raise SyntaxConfigError(
                        f"Expected ',' after closing bracket, got {pending!r}"
                    )
                after_brace = False
            else:
                result.extend(_resolve_preset(pending))

        index += 1
        start = index

    if in_brace:
        raise SyntaxConfigError("Unterminated bracket in syntax string")

    tail = text[start:].strip()
    if after_brace:
        if tail:
            raise SyntaxConfigError(f"Expected ',' after closing bracket, got {tail!r}")
    else:
        result.extend(_resolve_preset(tail))

    logger.debug("Selector %r resolved to %d syntax(es)", text, len(result))
    return result


__all__ = ["parse_syntaxes"]
