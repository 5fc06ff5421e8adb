"""Keyed and indexed variable containers.

``Vars`` is an insertion-ordered mapping and ``VarsList`` an index sequence.
Both answer lookups on missing entries with a configurable default value, and
``Vars`` can be put in "loose" mode where ``has()`` always reports True.
Validation results (``result``, ``errors``, ``values``) are produced as
``Vars`` instances, and both types are accepted as validation targets.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

# Marker for "no explicit default passed" (None is a legitimate default)
_MISSING: Any = object()


def _render_key(modifier: str | Callable[[Any], str] | None, key: Any) -> Any:
    """Render a key through a %-style modifier, a callable, or a plain prefix."""
    if modifier is None:
        return key
    if callable(modifier):
        return modifier(key)
    if "%" in modifier:
        return modifier % (key,)
    return f"{modifier}{key}"


# =============================================================================
# Vars
# =============================================================================


class Vars:
    """Insertion-ordered keyed container with default-on-miss and loose mode.

    Example:
        v = Vars.from_dict({"name": "Al"})
        v.get("name")          # "Al"
        v.get("age")           # None (container default)
        v.set_default(0)
        v.get("age")           # 0
        v.set_loose(True)
        v.has("anything")      # True
    """

    def __init__(self) -> None:
        self._vars: dict[Any, Any] = {}
        self._default: Any = None
        self._loose = False

    @classmethod
    def from_dict(cls, src: Any) -> Vars:
        """Make a new instance holding a copy of ``src``."""
        self = cls()
        self.import_from(src)
        return self

    @classmethod
    def wrap(cls, src: dict[Any, Any]) -> Vars:
        """Make a new instance sharing ``src`` as its backing store."""
        self = cls()
        self._vars = src
        return self

    def get(self, name: Any, default: Any = _MISSING) -> Any:
        if name in self._vars:
            return self._vars[name]
        return self._default if default is _MISSING else default

    def has(self, name: Any) -> bool:
        return self._loose or name in self._vars

    def set(self, name: Any, value: Any) -> None:
        self._vars[name] = value

    def remove(self, name: Any) -> None:
        self._vars.pop(name, None)

    def keys(self) -> VarsList:
        return VarsList.from_iterable(self._vars.keys())

    def items(self) -> Iterator[tuple[Any, Any]]:
        return iter(list(self._vars.items()))

    def values(self) -> Iterator[Any]:
        return iter(list(self._vars.values()))

    def count(self) -> int:
        return len(self._vars)

    def set_default(self, value: Any) -> None:
        """Set the value returned for missing names."""
        self._default = value

    def set_loose(self, flag: bool) -> None:
        """Make ``has()`` return True for every name."""
        self._loose = bool(flag)

    @property
    def loose(self) -> bool:
        return self._loose

    def to_dict(
        self,
        keys: Iterable[Any] | None = None,
        default: Any = None,
        modifier: str | Callable[[Any], str] | None = "%s",
    ) -> dict[Any, Any]:
        """Export entries as a plain dict.

        Args:
            keys: Restrict the export to these names (missing ones take ``default``)
            default: Value for requested names that are not stored
            modifier: %-style format, callable or prefix applied to every key
        """
        names = list(keys) if keys is not None else list(self._vars.keys())
        return {_render_key(modifier, k): self.get(k, default) for k in names}

    def import_from(
        self,
        src: Any,
        keys: Iterable[Any] | None = None,
        default: Any = None,
        modifier: str | Callable[[Any], str] | None = "%s",
    ) -> None:
        """Import entries from a mapping, pairs, another Vars, or an object.

        Raises:
            TypeError: If ``src`` is a scalar
        """
        if isinstance(src, Vars):
            source = dict(src.items())
        elif isinstance(src, Mapping):
            source = dict(src)
        elif isinstance(src, (str, bytes, int, float, bool)) or src is None:
            raise TypeError(f"Cannot import from scalar value: {src!r}")
        elif isinstance(src, Iterable):
            source = dict(src)
        else:
            source = {k: v for k, v in vars(src).items() if not k.startswith("_")}

        names = list(keys) if keys is not None else list(source.keys())
        for k in names:
            self.set(_render_key(modifier, k), source.get(k, default))

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._vars.keys()))

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, name: Any) -> bool:
        return self.has(name)

    def __repr__(self) -> str:
        return f"Vars({self._vars!r})"


# =============================================================================
# VarsList
# =============================================================================


class VarsList:
    """Index sequence with default-on-overflow lookups."""

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._default: Any = None

    @classmethod
    def from_iterable(cls, src: Iterable[Any]) -> VarsList:
        self = cls()
        self.concat(src)
        return self

    @classmethod
    def wrap(cls, src: list[Any]) -> VarsList:
        """Make a new instance sharing ``src`` as its backing store."""
        self = cls()
        self._items = src
        return self

    def push(self, *values: Any) -> None:
        self._items.extend(values)

    def pop(self) -> Any:
        return self._items.pop() if self._items else None

    def unshift(self, *values: Any) -> None:
        # Each value goes to the head in turn: unshift(1, 2) -> [2, 1, ...]
        for value in values:
            self._items.insert(0, value)

    def shift(self) -> Any:
        return self._items.pop(0) if self._items else None

    def concat(self, *sources: Iterable[Any]) -> None:
        for source in sources:
            self._items.extend(source)

    def sort(self, key: Callable[[Any], Any] | None = None, reverse: bool = False) -> None:
        self._items.sort(key=key, reverse=reverse)

    def count(self) -> int:
        return len(self._items)

    def join(self, sep: str = ",") -> str:
        return sep.join(str(v) for v in self._items)

    def reverse(self) -> VarsList:
        return VarsList.from_iterable(reversed(self._items))

    def slice(self, offset: int, length: int | None = None) -> VarsList:
        end = None if length is None else offset + length
        return VarsList.from_iterable(self._items[offset:end])

    def splice(
        self,
        offset: int,
        length: int = 0,
        replacement: Iterable[Any] | None = None,
    ) -> VarsList:
        """Remove ``length`` items at ``offset``, inserting ``replacement``.

        Returns:
            The removed items
        """
        removed = self._items[offset:offset + length]
        self._items[offset:offset + length] = list(replacement or [])
        return VarsList.from_iterable(removed)

    def insert(self, offset: int, *values: Any) -> None:
        self._items[offset:offset] = list(values)

    def remove(self, offset: int, length: int = 1) -> None:
        del self._items[offset:offset + length]

    def index(self, value: Any) -> int:
        try:
            return self._items.index(value)
        except ValueError:
            return -1

    def has(self, idx: int) -> bool:
        return 0 <= idx < len(self._items)

    def get(self, idx: int, default: Any = _MISSING) -> Any:
        if self.has(idx):
            return self._items[idx]
        return self._default if default is _MISSING else default

    def set(self, idx: int, value: Any, default: Any = _MISSING) -> None:
        """Store ``value`` at ``idx``, padding any gap with the default."""
        filler = self._default if default is _MISSING else default
        while len(self._items) < idx:
            self._items.append(filler)
        if idx == len(self._items):
            self._items.append(value)
        else:
            self._items[idx] = value

    def set_default(self, value: Any) -> None:
        self._default = value

    def to_list(self) -> list[Any]:
        return list(self._items)

    def to_dict(self, modifier: str | None = None) -> dict[Any, Any]:
        return {_render_key(modifier, i): v for i, v in enumerate(self._items)}

    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        return functools.reduce(fn, self._items, initial)

    def each(self, fn: Callable[[Any], Any]) -> None:
        for item in self._items:
            fn(item)

    def map(self, fn: Callable[[Any], Any]) -> VarsList:
        return VarsList.from_iterable(fn(v) for v in self._items)

    def filter(self, fn: Callable[[Any], bool]) -> VarsList:
        return VarsList.from_iterable(v for v in self._items if fn(v))

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VarsList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"VarsList({self._items!r})"
