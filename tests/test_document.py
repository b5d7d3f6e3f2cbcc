"""Tests for object graph traversal."""

from __future__ import annotations

from ttsextract.document import children_of, root_objects, walk_objects

from tests._fixtures.save_builder import make_object


def _guids(objs) -> list[str]:
    return [obj["GUID"] for obj in walk_objects(objs)]


def test_walk_objects_visits_last_root_first() -> None:
    objs = [make_object("000001"), make_object("000002"), make_object("000003")]
    assert _guids(objs) == ["000003", "000002", "000001"]


def test_walk_objects_descends_before_visiting_siblings() -> None:
    objs = [
        make_object(
            "a00001",
            contained=[make_object("c00001"), make_object("c00002")],
            states={"2": make_object("s00002"), "3": make_object("s00003")},
        ),
        make_object("a00002", contained=[make_object("c00003")]),
    ]
    assert _guids(objs) == [
        "a00002",
        "c00003",
        "a00001",
        "s00003",
        "s00002",
        "c00002",
        "c00001",
    ]


def test_walk_objects_skips_non_mappings() -> None:
    objs = [None, "text", 3, [make_object("000009")], make_object("000001", contained=[1, None])]
    assert _guids(objs) == ["000001"]


def test_children_of_ignores_malformed_collections() -> None:
    obj = {"ContainedObjects": {"not": "a list"}, "States": ["not", "a", "dict"]}
    assert children_of(obj) == []


def test_root_objects_requires_a_list() -> None:
    assert root_objects({"ObjectStates": {"a": 1}}) == []
    assert root_objects({}) == []
