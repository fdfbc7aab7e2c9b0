# core/steering.py
"""
Ordered, immutable model of a TELEMAC steering file.

A SteeringParameterSet maps parameter names to typed values in file order.
Values are ints, finite floats, bools, single-line strings or flat tuples of
those. Every change goes through merge()/remove()/with_source_file() and
returns a new set; the original is never touched.
"""
import math
import operator
from collections.abc import Mapping
from os import PathLike, fspath
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from core.exceptions import SteeringKeyError, SteeringTypeError
from utils.logging_config import get_logger

logger = get_logger(__name__)

Scalar = Union[bool, int, float, str]
Value = Union[Scalar, Tuple[Scalar, ...]]
Selector = Union[str, int, slice, Iterable[Union[str, int]]]

# Characters that cannot appear in a name written back as "NAME = VALUE".
_FORBIDDEN_NAME_CHARS = ("=", "/", "\n", "\r")
# Lines opening with '&' (&ETA, &FIN) are skipped on read.
_DIRECTIVE_PREFIX = "&"


class _RemoveSentinel:
    """Marker value: passing it in an update removes the parameter."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "REMOVE"

    def __reduce__(self):
        return (_RemoveSentinel, ())


REMOVE = _RemoveSentinel()


def normalize_key(key: Any) -> str:
    """Return the trimmed parameter name or raise SteeringTypeError."""
    if not isinstance(key, str):
        raise SteeringTypeError(
            f"Steering parameter names must be strings, got {type(key).__name__}: {key!r}", key=key)
    name = key.strip()
    if not name:
        raise SteeringTypeError("Steering parameter names must not be empty.", key=key)
    if any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
        raise SteeringTypeError(f"Steering parameter name {name!r} contains '=', '/' or a line break.", key=key)
    if name.startswith(_DIRECTIVE_PREFIX):
        raise SteeringTypeError(f"Steering parameter name {name!r} would be read as a solver directive.", key=key)
    return name


def _normalize_scalar(key: str, value: Any) -> Scalar:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SteeringTypeError(f"Value of '{key}' must be a finite real, got {value!r}.", key=key)
        return value
    if isinstance(value, str):
        if "\n" in value or "\r" in value:
            raise SteeringTypeError(f"Value of '{key}' must fit on one line.", key=key)
        return value
    raise SteeringTypeError(
        f"Value of '{key}' must be a scalar or a flat list of scalars, got {type(value).__name__}.", key=key)


def normalize_value(key: str, value: Any) -> Value:
    """
    Convert a caller-supplied value into the stored representation.

    Lists, tuples and 1-D arrays become tuples; a single element collapses to
    its scalar. Nested sequences, mappings and other objects are rejected.

    Raises:
        SteeringTypeError: If the value cannot be represented in a steering file.
    """
    if value is REMOVE:
        raise SteeringTypeError(f"REMOVE can only be used in updates (parameter '{key}').", key=key)
    if isinstance(value, np.ndarray):
        if value.ndim > 1:
            raise SteeringTypeError(f"Value of '{key}' must be flat, got a {value.ndim}-D array.", key=key)
        value = value.tolist()
    if isinstance(value, (list, tuple)):
        elements = []
        for element in value:
            if isinstance(element, (list, tuple, np.ndarray, Mapping, set)):
                raise SteeringTypeError(f"Value of '{key}' contains a nested composite value.", key=key)
            elements.append(_normalize_scalar(key, element))
        if not elements:
            raise SteeringTypeError(f"Value of '{key}' is an empty list.", key=key)
        if len(elements) == 1:
            return elements[0]
        return tuple(elements)
    return _normalize_scalar(key, value)


def _iter_pairs(items: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(items, Mapping):
        yield from items.items()
        return
    if isinstance(items, (str, bytes)):
        raise SteeringTypeError("Expected a mapping or an iterable of (name, value) pairs, got a string.")
    try:
        iterator = iter(items)
    except TypeError:
        raise SteeringTypeError(
            f"Expected a mapping or an iterable of (name, value) pairs, got {type(items).__name__}.") from None
    for pair in iterator:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise SteeringTypeError(f"Expected a (name, value) pair, got {pair!r}.")
        yield pair[0], pair[1]


def _typed(value: Value) -> Any:
    # bool == 1 and 1 == 1.0 in Python; steering values compare by type too.
    if isinstance(value, tuple):
        return tuple(_typed(v) for v in value)
    return (type(value).__name__, value)


class SteeringParameterSet(Mapping):
    """
    Ordered, read-only mapping of steering parameter names to values.

    * ``s["TIME STEP"]`` and ``s[0]`` return a value.
    * ``s[1:3]``, ``s[["TIME STEP", "DURATION"]]`` and ``s.subset(...)`` return
      a new set of the same type that keeps ``source_file``.
    * Equality compares names, order and typed values; ``source_file`` is
      metadata and does not take part.
    """

    __slots__ = ("_data", "_source_file")

    def __init__(self, items: Any = (), source_file: Optional[Union[str, PathLike]] = None):
        data: Dict[str, Value] = {}
        for key, value in _iter_pairs(items):
            name = normalize_key(key)
            normalized = normalize_value(name, value)
            if name in data:
                logger.warning("Duplicate steering parameter '%s'; the last value (%r) wins.", name, normalized)
            data[name] = normalized
        self._data = data
        self._source_file = fspath(source_file) if source_file is not None else None

    @classmethod
    def _from_validated(cls, data: Dict[str, Value], source_file: Optional[str]) -> "SteeringParameterSet":
        obj = cls.__new__(cls)
        obj._data = data
        obj._source_file = source_file
        return obj

    @property
    def source_file(self) -> Optional[str]:
        return self._source_file

    # ------------------------------------------------------------------
    # Mapping interface
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._data

    def __getitem__(self, selector):
        if isinstance(selector, str):
            try:
                return self._data[selector]
            except KeyError:
                raise SteeringKeyError([selector]) from None
        if isinstance(selector, slice):
            return self._select(list(self._data)[selector])
        if isinstance(selector, (list, tuple)):
            return self.subset(selector)
        return self._data[self._name_at(selector)]

    def _name_at(self, position: Any) -> str:
        if isinstance(position, bool):
            raise SteeringTypeError(f"Invalid steering parameter selector: {position!r}")
        try:
            index = operator.index(position)
        except TypeError:
            raise SteeringTypeError(f"Invalid steering parameter selector: {position!r}") from None
        names = list(self._data)
        try:
            return names[index]
        except IndexError:
            raise IndexError(f"Steering parameter position {index} out of range for {len(names)} parameters") from None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SteeringParameterSet):
            mine, theirs = self._data, other._data
        elif isinstance(other, Mapping):
            mine = self._data
            try:
                theirs = {normalize_key(k): normalize_value(k, v) for k, v in other.items()}
            except SteeringTypeError:
                return False
        else:
            return NotImplemented
        return [(k, _typed(v)) for k, v in mine.items()] == [(k, _typed(v)) for k, v in theirs.items()]

    __hash__ = None

    def __repr__(self) -> str:
        from core.presentation import format_steering
        return format_steering(self)

    # ------------------------------------------------------------------
    # Subsetting
    # ------------------------------------------------------------------
    def subset(self, selector: Selector) -> "SteeringParameterSet":
        """
        Return the selected parameters as a set of the same type.

        Names and positions may be mixed; the result follows this set's
        order. Slices follow ordinary sequence slicing.

        Raises:
            SteeringKeyError: If any selected name is absent (all are listed).
            IndexError: If a position is out of range.
        """
        if isinstance(selector, slice):
            return self._select(list(self._data)[selector])
        if isinstance(selector, (str, int, np.integer)):
            selector = [selector]
        wanted = set()
        missing: List[str] = []
        for item in selector:
            if isinstance(item, str):
                if item in self._data:
                    wanted.add(item)
                else:
                    missing.append(item)
            else:
                wanted.add(self._name_at(item))
        if missing:
            raise SteeringKeyError(missing)
        return self._select([name for name in self._data if name in wanted])

    def _select(self, names: Iterable[str]) -> "SteeringParameterSet":
        return type(self)._from_validated({name: self._data[name] for name in names}, self._source_file)

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------
    def merge(self, updates: Any) -> "SteeringParameterSet":
        """
        Apply additions, replacements and removals and return a new set.

        Existing names keep their position, new names are appended, and names
        mapped to REMOVE are dropped (absent names are ignored).

        Args:
            updates: A mapping or an iterable of (name, value) pairs.

        Raises:
            SteeringTypeError: If an update has an invalid name or value.
        """
        data = dict(self._data)
        for key, value in _iter_pairs(updates):
            name = normalize_key(key)
            if value is REMOVE:
                if data.pop(name, None) is None:
                    logger.debug("Steering parameter '%s' not present; nothing to remove.", name)
                continue
            data[name] = normalize_value(name, value)
        return type(self)._from_validated(data, self._source_file)

    def remove(self, *names: str) -> "SteeringParameterSet":
        return self.merge((name, REMOVE) for name in names)

    def with_source_file(self, source_file: Optional[Union[str, PathLike]]) -> "SteeringParameterSet":
        """Return a copy that points at another file ("save as")."""
        return type(self)._from_validated(
            dict(self._data), fspath(source_file) if source_file is not None else None)

    def copy(self) -> "SteeringParameterSet":
        return type(self)._from_validated(dict(self._data), self._source_file)

    def to_dict(self) -> Dict[str, Value]:
        return dict(self._data)
