"""Naming utilities for RowQL.

Every GraphQL name RowQL emits (types, fields, enum members) is derived from
SQL names through these helpers, so the same table always produces the same
schema names.
"""
from __future__ import annotations

import keyword
import re

__all__ = ["camel_to_snake", "snake_to_camel", "constant_case", "python_attr_name"]

_word_split = re.compile(r"[^0-9A-Za-z]+")


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase identifier to snake_case.

    Idempotent for already snake_case input. Handles sequences of capitals.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def snake_to_camel(name: str, upper_first: bool = False) -> str:
    """Convert a SQL-ish identifier to camelCase or PascalCase.

    Underscores, dashes and spaces separate words. upper_first=False returns
    lowerCamelCase (default), True returns UpperCamelCase. Inner capitals of a
    word are kept, so ``user_ID`` becomes ``userID``.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    parts = [p for p in _word_split.split(name) if p]
    if not parts:
        return ''
    head = parts[0]
    if upper_first:
        first = head[0].upper() + head[1:]
    elif head.isupper():
        first = head.lower()
    else:
        first = head[0].lower() + head[1:]
    rest = ''.join(p[0].upper() + p[1:] for p in parts[1:])
    return first + rest


def constant_case(name: str) -> str:
    """camelCase/snake_case -> CONSTANT_CASE (enum member names)."""
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    return camel_to_snake(snake_to_camel(name)).upper()


def python_attr_name(name: str) -> str:
    """Safe Python attribute name for a GraphQL field name.

    Generated Strawberry classes are dataclasses, so attribute names must be
    identifiers and not keywords. The GraphQL name is always passed
    explicitly, so this never leaks into the schema.
    """
    attr = re.sub(r"\W", "_", name or '_')
    if attr[0].isdigit():
        attr = '_' + attr
    if keyword.iskeyword(attr):
        attr += '_'
    return attr
