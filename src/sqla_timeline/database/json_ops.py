"""Change-set JSON operators that PostgreSQL and SQLite both understand.

A change set is stored as ``{attribute: [old, new]}``. PostgreSQL reads it
through the JSONB operators (``?`` can use the GIN index); SQLite through
the JSON1 functions.
"""

from typing import Any

from sqlalchemy import Boolean, String, case, cast, func, literal_column, or_
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.compiler import SQLCompiler
from sqlalchemy.sql.functions import FunctionElement


class has_attribute(FunctionElement[bool]):
    """True when the change set has a key for the attribute.

    Example:
        has_attribute(TimelineEntry.change_set, literal("title"))
    """

    type = Boolean()
    inherit_cache = True


class new_value_text(FunctionElement[str]):
    """The new value of an attribute as text.

    Strings render unquoted and booleans as ``true`` / ``false``; JSON
    null and missing attributes are SQL NULL.
    """

    type = String()
    inherit_cache = True


def _arguments(element: FunctionElement[Any]) -> tuple[Any, Any]:
    document, attribute = element.clauses.clauses
    return document, attribute


@compiles(has_attribute)
def _has_attribute_default(
    element: has_attribute, compiler: SQLCompiler, **kw: Any
) -> str:
    document, attribute = _arguments(element)
    return compiler.process(document.op("?", is_comparison=True)(attribute), **kw)


@compiles(has_attribute, "sqlite")
def _has_attribute_sqlite(
    element: has_attribute, compiler: SQLCompiler, **kw: Any
) -> str:
    document, attribute = _arguments(element)
    path = func.printf(literal_column("""'$."%s"'"""), attribute)
    return compiler.process(func.json_type(document, path).is_not(None), **kw)


@compiles(new_value_text)
def _new_value_text_default(
    element: new_value_text, compiler: SQLCompiler, **kw: Any
) -> str:
    document, attribute = _arguments(element)
    expr = document.op("->")(attribute).op("->>")(literal_column("1"))
    return compiler.process(expr, **kw)


@compiles(new_value_text, "sqlite")
def _new_value_text_sqlite(
    element: new_value_text, compiler: SQLCompiler, **kw: Any
) -> str:
    document, attribute = _arguments(element)
    path = func.printf(literal_column("""'$."%s"[1]'"""), attribute)
    kind = func.json_type(document, path)
    expr = case(
        (
            or_(kind == literal_column("'true'"), kind == literal_column("'false'")),
            kind,
        ),
        else_=cast(func.json_extract(document, path), String),
    )
    return compiler.process(expr, **kw)
