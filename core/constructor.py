# core/constructor.py
"""
Single entry point for building steering parameter sets.

Each accepted input shape is its own variant carrying a ``kind``
discriminator; build_steering() looks the handler up in a registry.
steering() turns a raw argument into the matching variant first.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from os import PathLike
from typing import Any, Callable, ClassVar, Dict, Optional, Union

from core.exceptions import SteeringTypeError
from core.steering import SteeringParameterSet
from inout.cas_parser import read_steering_file
from inout.template import generate_template

PathType = Union[str, PathLike]


class InputKind(Enum):
    TEMPLATE = "template"
    FILE = "file"
    MAPPING = "mapping"
    STEERING = "steering"


@dataclass(frozen=True)
class TemplateInput:
    """Built-in template, optionally destined for ``target``."""
    target: Optional[PathType] = None
    kind: ClassVar[InputKind] = InputKind.TEMPLATE


@dataclass(frozen=True)
class FileInput:
    """Steering file at ``path``; ``target`` replaces the recorded source file."""
    path: PathType
    target: Optional[PathType] = None
    kind: ClassVar[InputKind] = InputKind.FILE


@dataclass(frozen=True)
class MappingInput:
    """A mapping or an iterable of (name, value) pairs."""
    items: Any
    target: Optional[PathType] = None
    kind: ClassVar[InputKind] = InputKind.MAPPING


@dataclass(frozen=True)
class SteeringInput:
    """An existing set, optionally merged with ``updates`` and/or saved as ``target``."""
    steering: SteeringParameterSet
    target: Optional[PathType] = None
    updates: Optional[Any] = None
    kind: ClassVar[InputKind] = InputKind.STEERING


SteeringSource = Union[TemplateInput, FileInput, MappingInput, SteeringInput]


def _from_template(source: TemplateInput) -> SteeringParameterSet:
    template = generate_template()
    if source.target is None:
        return template
    return template.with_source_file(source.target)


def _from_file(source: FileInput) -> SteeringParameterSet:
    parsed = read_steering_file(source.path)
    if source.target is None:
        return parsed
    return parsed.with_source_file(source.target)


def _from_mapping(source: MappingInput) -> SteeringParameterSet:
    return SteeringParameterSet(source.items, source_file=source.target)


def _from_steering(source: SteeringInput) -> SteeringParameterSet:
    if not isinstance(source.steering, SteeringParameterSet):
        raise SteeringTypeError(
            f"SteeringInput needs a SteeringParameterSet, got {type(source.steering).__name__}.")
    if source.updates is not None:
        result = source.steering.merge(source.updates)
    else:
        result = source.steering.copy()
    if source.target is not None:
        result = result.with_source_file(source.target)
    return result


_handler_registry: Dict[InputKind, Callable[[Any], SteeringParameterSet]] = {
    InputKind.TEMPLATE: _from_template,
    InputKind.FILE: _from_file,
    InputKind.MAPPING: _from_mapping,
    InputKind.STEERING: _from_steering,
}


def register_input_handler(kind: InputKind, handler: Callable[[Any], SteeringParameterSet]) -> None:
    if not isinstance(kind, InputKind):
        raise SteeringTypeError("Input kind must be an InputKind member.")
    if not callable(handler):
        raise SteeringTypeError("Input handler must be callable.")
    _handler_registry[kind] = handler


def build_steering(source: SteeringSource) -> SteeringParameterSet:
    """Dispatch ``source`` to the handler registered for its kind."""
    kind = getattr(source, "kind", None)
    handler = _handler_registry.get(kind) if isinstance(kind, InputKind) else None
    if handler is None:
        raise SteeringTypeError(f"Unsupported steering input: {type(source).__name__}")
    return handler(source)


def classify_input(x: Any = None, target: Optional[PathType] = None, updates: Any = None) -> SteeringSource:
    """
    Wrap a raw argument into exactly one input variant.

    None -> TemplateInput, str/PathLike -> FileInput,
    SteeringParameterSet -> SteeringInput, mapping or list/tuple of pairs ->
    MappingInput.

    Raises:
        SteeringTypeError: For any other shape, or updates given without an
            existing set.
    """
    if updates is not None and not isinstance(x, SteeringParameterSet):
        raise SteeringTypeError("Updates can only be applied to an existing steering parameter set.")
    if x is None:
        return TemplateInput(target=target)
    if isinstance(x, SteeringParameterSet):
        return SteeringInput(steering=x, target=target, updates=updates)
    if isinstance(x, (str, PathLike)):
        return FileInput(path=x, target=target)
    if isinstance(x, (Mapping, list, tuple)):
        return MappingInput(items=x, target=target)
    raise SteeringTypeError(f"Cannot build a steering parameter set from {type(x).__name__}.")


def steering(x: Any = None, target: Optional[PathType] = None, updates: Any = None) -> SteeringParameterSet:
    """
    Build a steering parameter set from the template, a file, a mapping or
    an existing set.

    Examples:
        steering()                                  # template
        steering("t2d.cas")                         # parse a file
        steering({"TIME STEP": 60})                 # wrap a mapping
        steering(s, target="run2.cas")              # save as
        steering(s, updates={"DURATION": 7200})     # merge
    """
    return build_steering(classify_input(x, target=target, updates=updates))
