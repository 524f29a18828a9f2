"""Field paths and lenses over structured values.

A path such as ``address.city`` or ``benefits[0]`` is parsed into a
:class:`FieldPath`, whose :meth:`FieldPath.lens` composes one :class:`Lens`
per segment. A lens is a getter/setter pair; its setter never mutates the
value it is given, it returns a new root with one field replaced.

Supported containers:
- pydantic models (``model_copy(update=...)``, so frozen models work)
- dataclass instances (``dataclasses.replace``)
- mappings (shallow copy, new keys allowed on write)
- lists and tuples (shallow copy, integer index segments)
"""

from __future__ import annotations

import dataclasses
import functools
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from jsonblob.domain.errors import FieldPathError

S = TypeVar("S")
A = TypeVar("A")
B = TypeVar("B")

Segment = str | int

_NAME_RE = re.compile(r"^(?P<name>[^.\[\]]*)(?P<indices>(?:\[-?\d+\])*)$")
_INDEX_RE = re.compile(r"\[(-?\d+)\]")


@dataclass(frozen=True)
class Lens(Generic[S, A]):
    """A getter paired with a non-mutating setter.

    Usage::

        city = Lens.key("address").compose(Lens.key("city"))
        city.get(person)                  # "Cupertino"
        moved = city.set(person, "Paris") # person is unchanged
    """

    getter: Callable[[S], A]
    setter: Callable[[S, A], S]

    def get(self, root: S) -> A:
        return self.getter(root)

    def set(self, root: S, value: A) -> S:
        return self.setter(root, value)

    def modify(self, root: S, fn: Callable[[A], A]) -> S:
        """Replace the focused value with ``fn(current)``."""
        return self.set(root, fn(self.get(root)))

    def compose(self, inner: Lens[A, B]) -> Lens[S, B]:
        """Focus *inner* through this lens (outer first, then inner)."""

        def _get(root: S) -> B:
            return inner.get(self.get(root))

        def _set(root: S, value: B) -> S:
            return self.set(root, inner.set(self.get(root), value))

        return Lens(_get, _set)

    @staticmethod
    def key(segment: Segment) -> Lens[Any, Any]:
        """Lens for a single attribute/key name or list index."""
        if isinstance(segment, int):
            return Lens(
                functools.partial(_get_index, index=segment),
                functools.partial(_set_index, index=segment),
            )
        return Lens(
            functools.partial(_get_name, name=segment),
            functools.partial(_set_name, name=segment),
        )


@dataclass(frozen=True)
class FieldPath:
    """A parsed, possibly nested reference to a field within a value."""

    segments: tuple[Segment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise FieldPathError("Field path must have at least one segment", path="")

    def __str__(self) -> str:
        out = ""
        for seg in self.segments:
            if isinstance(seg, int):
                out += f"[{seg}]"
            else:
                out += f".{seg}" if out else seg
        return out

    @classmethod
    def of(cls, path: str | Sequence[Segment] | FieldPath) -> FieldPath:
        """Coerce a dotted string, a segment sequence, or a FieldPath."""
        if isinstance(path, FieldPath):
            return path
        if isinstance(path, str):
            return parse_path(path)
        return cls(tuple(path))

    def lens(self) -> Lens[Any, Any]:
        return _build_lens(self.segments)

    def get(self, root: Any) -> Any:
        try:
            return self.lens().get(root)
        except FieldPathError as exc:
            raise FieldPathError(f"{exc} (in path {str(self)!r})", path=str(self)) from exc

    def set(self, root: Any, value: Any) -> Any:
        try:
            return self.lens().set(root, value)
        except FieldPathError as exc:
            raise FieldPathError(f"{exc} (in path {str(self)!r})", path=str(self)) from exc


@functools.lru_cache(maxsize=256)
def parse_path(path: str) -> FieldPath:
    """Parse ``"a.b[0].c"`` into a :class:`FieldPath`.

    Raises:
        FieldPathError: On an empty path or a malformed segment.
    """
    if not path or not path.strip():
        raise FieldPathError("Field path must not be empty", path=path)

    segments: list[Segment] = []
    for part in path.split("."):
        match = _NAME_RE.match(part)
        if match is None:
            raise FieldPathError(f"Malformed path segment {part!r}", path=path)
        name = match.group("name")
        indices = [int(i) for i in _INDEX_RE.findall(match.group("indices"))]
        if not name and not indices:
            raise FieldPathError(f"Malformed path segment {part!r}", path=path)
        if name:
            segments.append(name)
        segments.extend(indices)
    return FieldPath(tuple(segments))


@functools.lru_cache(maxsize=256)
def _build_lens(segments: tuple[Segment, ...]) -> Lens[Any, Any]:
    lens = Lens.key(segments[0])
    for seg in segments[1:]:
        lens = lens.compose(Lens.key(seg))
    return lens


# ---------------------------------------------------------------------------
# Segment accessors
# ---------------------------------------------------------------------------


def _get_name(obj: Any, *, name: str) -> Any:
    if isinstance(obj, Mapping):
        try:
            return obj[name]
        except KeyError:
            raise FieldPathError(f"Key {name!r} not found", path=name) from None
    try:
        return getattr(obj, name)
    except AttributeError:
        raise FieldPathError(
            f"{type(obj).__name__} has no field {name!r}", path=name
        ) from None


def _set_name(obj: Any, value: Any, *, name: str) -> Any:
    if isinstance(obj, BaseModel):
        if name not in type(obj).model_fields:
            raise FieldPathError(f"{type(obj).__name__} has no field {name!r}", path=name)
        return obj.model_copy(update={name: value})
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        names = {f.name for f in dataclasses.fields(obj)}
        if name not in names:
            raise FieldPathError(f"{type(obj).__name__} has no field {name!r}", path=name)
        return dataclasses.replace(obj, **{name: value})
    if isinstance(obj, Mapping):
        updated = dict(obj)
        updated[name] = value
        return updated
    raise FieldPathError(f"Cannot set field {name!r} on {type(obj).__name__}", path=name)


def _get_index(obj: Any, *, index: int) -> Any:
    if isinstance(obj, Mapping):
        if index in obj:
            return obj[index]
        raise FieldPathError(f"Key {index!r} not found", path=f"[{index}]")
    if not isinstance(obj, Sequence) or isinstance(obj, str | bytes):
        raise FieldPathError(f"{type(obj).__name__} is not indexable", path=f"[{index}]")
    try:
        return obj[index]
    except IndexError:
        raise FieldPathError(
            f"Index {index} out of range (length {len(obj)})", path=f"[{index}]"
        ) from None


def _set_index(obj: Any, value: Any, *, index: int) -> Any:
    if isinstance(obj, Mapping):
        updated = dict(obj)
        updated[index] = value
        return updated
    if not isinstance(obj, list | tuple):
        raise FieldPathError(f"{type(obj).__name__} is not indexable", path=f"[{index}]")
    items = list(obj)
    try:
        items[index] = value
    except IndexError:
        raise FieldPathError(
            f"Index {index} out of range (length {len(items)})", path=f"[{index}]"
        ) from None
    return tuple(items) if isinstance(obj, tuple) else items
