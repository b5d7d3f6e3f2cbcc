"""Helpers for the decoded save document and its nested object graph."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Sequence

JsonValue = Any
JsonDict = Dict[str, Any]

OBJECT_STATES_KEY = "ObjectStates"
CONTAINED_OBJECTS_KEY = "ContainedObjects"
STATES_KEY = "States"


def is_json_dict(value: JsonValue) -> bool:
    return isinstance(value, dict)


def is_json_array(value: JsonValue) -> bool:
    return isinstance(value, list)


def root_objects(mod: JsonDict) -> List[JsonValue]:
    """Return the top-level objects of a save, or an empty list."""
    objs = mod.get(OBJECT_STATES_KEY)
    return objs if is_json_array(objs) else []


def children_of(obj: JsonDict) -> List[JsonValue]:
    """Return the objects nested in ``obj``: contained objects, then alternate states."""
    children: List[JsonValue] = []
    contained = obj.get(CONTAINED_OBJECTS_KEY)
    if is_json_array(contained):
        children.extend(contained)
    states = obj.get(STATES_KEY)
    if is_json_dict(states):
        children.extend(states.values())
    return children


def walk_objects(objs: Sequence[JsonValue]) -> Iterator[JsonDict]:
    """Yield every object of the graph using a last-in, first-out stack.

    The stack is seeded with ``objs`` in order, so the last root object is
    visited first. An object's children are pushed before the object is
    yielded. Output naming depends on this order; do not replace it with
    recursion.
    """
    stack: List[JsonValue] = list(objs)
    while stack:
        obj = stack.pop()
        if not is_json_dict(obj):
            continue
        stack.extend(children_of(obj))
        yield obj


__all__ = [
    "CONTAINED_OBJECTS_KEY",
    "JsonDict",
    "JsonValue",
    "OBJECT_STATES_KEY",
    "STATES_KEY",
    "children_of",
    "is_json_array",
    "is_json_dict",
    "root_objects",
    "walk_objects",
]
