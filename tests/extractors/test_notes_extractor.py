"""Tests for notebook extraction."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from ttsextract.extractors import NotesExtractor
from ttsextract.extractors.notes import sort_tab_keys


def _notes(tabs: object) -> list:
    extractor = NotesExtractor()
    extractor.extract({"TabStates": tabs})
    return extractor.tab_data


def test_sort_tab_keys_puts_numbers_first() -> None:
    assert sort_tab_keys(["10", "2", "b", "a"]) == ["2", "10", "a", "b"]
    assert sort_tab_keys(["x", "3abc", "-1", "B"]) == ["-1", "3abc", "B", "x"]


def test_notes_are_ordered_and_named_from_titles() -> None:
    notes = _notes(
        {
            "10": {"title": "Setup", "body": "Shuffle.\r\n"},
            "2": {"title": "Rules: v2", "body": "Play."},
            "b": {"title": "", "body": "Untitled body"},
        }
    )

    assert [(n.filename, n.title, n.body) for n in notes] == [
        ("Rules  v2.txt", "Rules: v2", "Play."),
        ("Setup.txt", "Setup", "Shuffle.\n"),
        ("[Untitled].txt", "", "Untitled body"),
    ]
    assert notes[1].render() == "Title: Setup\n\nShuffle.\n"


def test_tabs_without_usable_body_are_dropped() -> None:
    notes = _notes(
        {
            "0": {"title": "Empty", "body": ""},
            "1": {"title": "Missing"},
            "2": {"title": "Number", "body": 5},
            "3": "not a tab",
            "4": {"title": 7, "body": "kept"},
        }
    )

    assert [(n.filename, n.title) for n in notes] == [("[Untitled].txt", "")]


def test_duplicate_titles_get_ordinal_suffixes() -> None:
    notes = _notes(
        {
            "1": {"title": "Notes", "body": "a"},
            "2": {"title": "Other", "body": "b"},
            "3": {"title": "Notes.", "body": "c"},
            "4": {"title": "", "body": "d"},
            "5": {"title": "...", "body": "e"},
        }
    )

    assert [(n.filename, n.index) for n in notes] == [
        ("Notes.1.txt", 1),
        ("Other.txt", 1),
        ("Notes.2.txt", 2),
        ("[Untitled].1.txt", 1),
        ("[Untitled].2.txt", 2),
    ]


def test_missing_tab_states_produces_nothing() -> None:
    assert _notes(["not", "a", "mapping"]) == []


def test_non_ascii_digit_keys_sort_as_text() -> None:
    assert sort_tab_keys(["٣", "b", "7"]) == ["7", "b", "٣"]


def test_note_records_are_immutable() -> None:
    (note,) = _notes({"0": {"title": "Setup", "body": "Shuffle."}})

    with pytest.raises(FrozenInstanceError):
        note.filename = "other.txt"
