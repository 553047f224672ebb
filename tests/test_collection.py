from collections.abc import Mapping
from pathlib import Path
import textwrap
import threading
from typing import Any

from pybtex.exceptions import PybtexError
import pytest

from bibrecords.core.bibliography import (
    CollectionView,
    Record,
    RecordCollection,
    resolve_unique_key,
)
from bibrecords.core.config import CollectionOptions
from bibrecords.core.exceptions import KeySpaceExhausted


class _RecordingEmitter:
    def __init__(self) -> None:
        self.debug_enabled = False
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _write(tmp_path: Path, filename: str, payload: str) -> Path:
    file_path = tmp_path / filename
    file_path.write_text(textwrap.dedent(payload).strip() + "\n", encoding="utf-8")
    return file_path


def test_record_registers_itself_with_its_key() -> None:
    record = Record()
    collection = RecordCollection()

    collection.add(record)

    assert record.key in collection.keys()
    assert collection[record.key] is record
    assert len(collection) == 1


def test_colliding_record_gets_a_new_key() -> None:
    collection = RecordCollection([Record()])
    record = Record()
    before = record.key

    collection.add(record)

    assert record.key in collection.keys()
    assert record.key != before
    assert record.key == "unknown-b"


def test_generated_key_collisions_advance_in_insertion_order() -> None:
    first = Record(author="Raven")
    second = Record(author="Raven")

    collection = RecordCollection([first, second])

    assert first.key == "raven-a"
    assert second.key == "raven-b"
    assert collection.find("raven-a") is first
    assert collection.find("raven-b") is second


def test_insertion_pins_the_key() -> None:
    record = Record(editor="John Hopkins", year=1996)
    RecordCollection([record])

    record.parse_names()

    assert record.key == "john1996a"
    assert record.generate_key() == "hopkins1996a"


def test_assigned_key_collision_falls_back_to_field_candidates() -> None:
    existing = Record(key="raven")
    duplicate = Record(key="raven", author="Poe, Edgar A.", year=1845)

    collection = RecordCollection([existing, duplicate])

    assert collection.keys() == ["raven", "poe1845a"]


def test_reassignment_is_reported() -> None:
    emitter = _RecordingEmitter()
    collection = RecordCollection(emitter=emitter)

    collection.add(Record(author="Raven"))
    collection.add(Record(author="Raven"))

    assert emitter.events == [
        ("key_reassigned", {"original": "raven-a", "assigned": "raven-b", "attempts": 2})
    ]
    issue = collection.issues[0]
    assert issue.key == "raven-b"
    assert "raven-a" in issue.message


def test_adding_the_same_record_twice_is_a_noop() -> None:
    record = Record(author="Raven")
    collection = RecordCollection([record])

    collection.add(record)

    assert collection.keys() == ["raven-a"]


def test_key_space_exhaustion() -> None:
    collection = RecordCollection(options=CollectionOptions(max_key_candidates=2))
    for _ in range(2):
        collection.add(Record(author="Raven"))

    with pytest.raises(KeySpaceExhausted):
        collection.add(Record(author="Raven"))


def test_resolve_unique_key_accepts_any_membership_view() -> None:
    taken = {"raven-a", "raven-b"}

    assert isinstance(taken, CollectionView)
    assert resolve_unique_key(Record(author="Raven"), taken) == ("raven-c", 3)
    assert resolve_unique_key(Record(author="Crow"), taken) == ("crow-a", 0)


def test_concurrent_insertions_get_distinct_keys() -> None:
    collection = RecordCollection()
    records = [Record(author="Raven") for _ in range(40)]

    threads = [threading.Thread(target=collection.add, args=(record,)) for record in records]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(collection) == 40
    assert len({record.key for record in records}) == 40


def test_sorted_records_are_in_key_order() -> None:
    collection = RecordCollection(
        [Record(key="raven3"), Record(key="raven1"), Record(key="raven2")]
    )

    assert [record.key for record in collection.sorted_records()] == [
        "raven1",
        "raven2",
        "raven3",
    ]
    assert [record.key for record in collection] == ["raven3", "raven1", "raven2"]


def test_remove_and_find() -> None:
    record = Record(key="raven")
    collection = RecordCollection([record])

    assert collection.remove("raven") is record
    assert collection.find("raven") is None
    assert "raven" not in collection
    assert collection.remove("raven") is None


def test_clone_is_independent() -> None:
    collection = RecordCollection([Record(key="raven", title="The Raven")])

    cloned = collection.clone()
    cloned["raven"].set("title", "Changed")
    cloned.add(Record(key="other"))

    assert collection["raven"]["title"] == "The Raven"
    assert "other" not in collection


def test_to_citations_sorted_by_key() -> None:
    collection = RecordCollection(
        [
            Record("book", key="b", author="Melville, Herman").parse_names(),
            Record("article", key="a", author="Poe, Edgar A.").parse_names(),
        ]
    )

    citations = collection.to_citations()

    assert [citation["id"] for citation in citations] == ["a", "b"]
    assert citations[0]["author"] == [{"family": "Poe", "given": "Edgar A."}]
    assert set(collection.to_dict()) == {"a", "b"}


def test_load_files_registers_records(tmp_path: Path) -> None:
    file_one = _write(
        tmp_path,
        "first.bib",
        """
        @article{smith2020,
            title = {Example Article},
            author = {Smith, John},
            year = {2020},
            journal = {Journal of Testing},
        }
        """,
    )
    file_two = _write(
        tmp_path,
        "second.bib",
        """
        @book{doe2021,
            title = {Example Book},
            author = {Jane Doe and Ludwig van Beethoven},
            year = {2021},
            month = feb,
            publisher = {Publishing House},
        }
        """,
    )
    emitter = _RecordingEmitter()
    collection = RecordCollection(emitter=emitter)

    collection.load_files([file_one, file_two])

    smith = collection.find("smith2020")
    assert smith is not None
    assert smith.kind == "article"
    assert smith["title"] == "Example Article"
    assert smith.names()[0].family == "Smith"

    doe = collection["doe2021"]
    assert [name.family for name in doe.names()] == ["Doe", "Beethoven"]
    assert doe.names()[1].particle == "van"
    assert doe.to_citation()["issued"] == {"date-parts": [[2021, 2]]}

    assert collection.file_stats == (
        (file_one.resolve(), 1),
        (file_two.resolve(), 1),
    )
    assert collection.source_of("doe2021") == file_two.resolve()
    assert not collection.issues
    assert [name for name, _ in emitter.events] == ["source_loaded", "source_loaded"]


def test_load_files_reassigns_duplicate_keys_across_files(tmp_path: Path) -> None:
    primary = _write(
        tmp_path,
        "primary.bib",
        """
        @article{duplicate,
            title = {Original Title},
            author = {Alpha, Alice},
            year = {2001},
        }
        """,
    )
    conflicting = _write(
        tmp_path,
        "conflicting.bib",
        """
        @article{duplicate,
            title = {Updated Title},
            author = {Beta, Bob},
            year = {2002},
        }
        """,
    )

    collection = RecordCollection()
    collection.load_files([primary, conflicting])

    assert collection.keys() == ["duplicate", "beta2002a"]
    assert collection["duplicate"]["title"] == "Original Title"
    assert collection["beta2002a"]["title"] == "Updated Title"
    issue = collection.issues[0]
    assert issue.source == conflicting.resolve()


def test_load_files_reports_empty_and_broken_files(tmp_path: Path) -> None:
    empty = _write(tmp_path, "empty.bib", "% nothing here")
    broken = _write(tmp_path, "broken.bib", "@article{broken, title = {Unclosed")
    emitter = _RecordingEmitter()
    collection = RecordCollection(emitter=emitter)

    collection.load_files([empty, broken, tmp_path / "missing.bib"])

    messages = [issue.message for issue in collection.issues]
    assert messages[0] == "No references found in file."
    assert messages[1].startswith("Failed to parse")
    assert messages[2].startswith("Failed to parse")
    assert len(emitter.warnings) == 2
    assert len(collection) == 0


def test_load_string_merges_inline_payload() -> None:
    collection = RecordCollection()

    collection.load_string(
        "@misc{inline, author = {Roe, Jane}, title = {Inline}}",
        source="inline.bib",
    )

    assert collection["inline"].names()[0].given == "Jane"
    assert collection.file_stats == ((Path("inline.bib"), 1),)


def test_load_string_without_name_parsing() -> None:
    collection = RecordCollection(options=CollectionOptions(parse_names=False))

    collection.load_string("@misc{inline, author = {Roe, Jane and Doe, John}}")

    assert len(collection["inline"].names()) == 1


def test_load_string_propagates_parse_errors() -> None:
    collection = RecordCollection()

    with pytest.raises(PybtexError):
        collection.load_string("@misc{broken, title = {Unclosed")


def test_load_string_reports_empty_payload() -> None:
    collection = RecordCollection()

    collection.load_string("")

    assert collection.issues[0].message == "No references found in inline bibliography data."
    assert collection.file_stats == ((Path("inline-bibliography.bib"), 0),)
