import os
import uuid

import pytest

from orbital_decay.decay.persistence import (
    STATUS_CORRUPT,
    STATUS_NOT_FOUND,
    STATUS_OK,
    format_record,
    load_record,
    parse_record,
    save_record,
)


def test_round_trip(tmp_path):
    record = {str(uuid.uuid4()): 1234.5, str(uuid.uuid4()): 0.1 + 0.2, str(uuid.uuid4()): 9.87654321e8}
    path = tmp_path / "saves" / "career" / "Kessler.dat"

    assert save_record(str(path), record) is True
    result = load_record(str(path))

    assert result.status == STATUS_OK
    assert list(result.record) == list(record)
    for key, value in record.items():
        assert result.record[key] == pytest.approx(value)


def test_missing_file_is_empty_not_error(tmp_path):
    result = load_record(str(tmp_path / "nope.dat"))
    assert result.status == STATUS_NOT_FOUND
    assert result.record == {}
    assert result.malformed == {}


def test_malformed_entry_is_isolated(tmp_path):
    path = tmp_path / "Kessler.dat"
    path.write_text("good-1 = 100.5\nbad = not-a-number\ngood-2 = 200\nnan-entry = nan\n", encoding="utf-8")

    result = load_record(str(path))

    assert result.ok
    assert result.record == {"good-1": 100.5, "good-2": 200.0}
    assert set(result.malformed) == {"bad", "nan-entry"}


def test_unparsable_file_is_corrupt(tmp_path):
    path = tmp_path / "Kessler.dat"
    path.write_text("this is not\na key value file\n", encoding="utf-8")
    result = load_record(str(path))
    assert result.status == STATUS_CORRUPT
    assert result.record == {}


def test_undecodable_file_is_corrupt(tmp_path):
    path = tmp_path / "Kessler.dat"
    path.write_bytes(b"\xff\xfe\xfa\x00garbage")
    assert load_record(str(path)).status == STATUS_CORRUPT


def test_comments_blank_lines_and_duplicates():
    text = "// decay schedule\n\n  a =  1.5  \nb=2\na = 99\n"
    result = parse_record(text)
    assert result.record == {"a": 1.5, "b": 2.0}


def test_empty_file_is_ok_and_empty():
    result = parse_record("")
    assert result.status == STATUS_OK
    assert result.record == {}


def test_format_is_one_line_per_entry():
    assert format_record({"abc": 12.25, "def": 3.0}) == "abc = 12.25\ndef = 3.0\n"


def test_save_failure_returns_false(tmp_path, caplog):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    assert save_record(str(blocker / "Kessler.dat"), {"a": 1.0}) is False
    assert "Failed to write decay record" in caplog.text


def test_save_replaces_previous_file_without_leftovers(tmp_path):
    path = tmp_path / "Kessler.dat"
    save_record(str(path), {"a": 1.0, "b": 2.0})
    save_record(str(path), {"c": 3.0})

    assert load_record(str(path)).record == {"c": 3.0}
    assert os.listdir(tmp_path) == ["Kessler.dat"]
