"""
db/params.py
------------
Typed, named query parameters.

Every statement in the data layer is written with named ``%(name)s``
placeholders and executed with a mapping built here. Values are never
formatted into SQL text; absent values bind as an explicit NULL.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional

PLACEHOLDER = re.compile(r"%\((\w+)\)s")


@dataclass(frozen=True)
class Parameter:
    """A single bound value together with its storage type."""
    name: str
    value: Any
    db_type: str  # 'null' | 'integer' | 'real' | 'text' | 'timestamp'


def _storage_type(value: Any) -> str:
    if value is None:
        return "null"
    # bool is an int subclass; store it as one
    if isinstance(value, int):
        return "integer"
    if isinstance(value, (float, Decimal)):
        return "real"
    if isinstance(value, (datetime, date)):
        return "timestamp"
    if isinstance(value, str):
        return "text"
    raise TypeError(f"Cannot bind parameter of type {type(value).__name__}")


def bind(name: str, value: Any) -> Parameter:
    """
    Build a named parameter, inferring its storage type from the value.

    Raises:
        TypeError: If the value has no storage mapping.
    """
    return Parameter(name=name, value=value, db_type=_storage_type(value))


def placeholders(sql: str) -> set[str]:
    """Return the names of all ``%(name)s`` placeholders in a statement."""
    return set(PLACEHOLDER.findall(sql))


class Parameters:
    """An ordered collection of bound parameters for one statement."""

    def __init__(self, **values: Any):
        self._params: dict[str, Parameter] = {}
        for name, value in values.items():
            self.add(name, value)

    def add(self, name: str, value: Any) -> "Parameters":
        self._params[name] = bind(name, value)
        return self

    def __getitem__(self, name: str) -> Parameter:
        return self._params[name]

    def __contains__(self, name: str) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params.values())

    def __len__(self) -> int:
        return len(self._params)

    def render(
        self, sql: str, adapt: Optional[Callable[[Parameter], Any]] = None
    ) -> dict[str, Any]:
        """
        Produce the driver mapping for `sql`.

        Args:
            sql: Statement text with ``%(name)s`` placeholders.
            adapt: Optional backend hook converting a Parameter to a driver value.

        Returns:
            Dict of placeholder name -> driver value, one entry per placeholder.

        Raises:
            ValueError: If a placeholder has no bound parameter.
        """
        names = placeholders(sql)
        missing = names - self._params.keys()
        if missing:
            raise ValueError(f"Unbound query parameters: {', '.join(sorted(missing))}")
        return {
            name: adapt(self._params[name]) if adapt else self._params[name].value
            for name in names
        }
