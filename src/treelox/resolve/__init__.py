"""treelox resolve: static scope resolution.

Entry point::

    from treelox.resolve import resolve

    resolution = resolve(program.statements)
    if not resolution.ok:
        for error in resolution.errors:
            print(error)
"""

from ._resolver import (
    ClassType,
    FunctionType,
    Resolution,
    Resolver,
    StaticError,
    resolve,
)
from ._table import ResolutionTable

__all__ = [
    "ClassType",
    "FunctionType",
    "Resolution",
    "ResolutionTable",
    "Resolver",
    "StaticError",
    "resolve",
]
