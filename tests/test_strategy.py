"""Tests for strategy table keys and serialisation."""

import pickle

import pytest

from wordle_engine.errors import MalformedStrategy
from wordle_engine.strategy import StrategyTable, state_key


@pytest.fixture
def table():
    return StrategyTable({
        state_key(["apple", "angle", "apply"]): ("apple", 1.584963),
        state_key(["crane", "crash"]): ("crane", 1.0),
    }, "v13")


def test_state_key_ignores_order():
    assert state_key(["crash", "crane"]) == state_key(["crane", "crash"])
    assert state_key(["crane", "crash"]).startswith("2:crane:")
    assert state_key(["crane"]) != state_key(["crash"])


class TestStrategyTable:
    def test_lookup(self, table):
        assert table.lookup(["apply", "apple", "angle"]) == ("apple", 1.584963)
        assert table.lookup(["apple"]) is None
        assert len(table) == 2
        assert state_key(["crane", "crash"]) in table

    def test_read_only(self, table):
        with pytest.raises(TypeError):
            table.entries["x"] = ("crane", 0.0)

    def test_bytes_round_trip(self, table):
        blob = table.to_bytes()
        assert blob.startswith(b"wordle-strategy 1 v13\n")
        loaded = StrategyTable.from_bytes(blob, expected_version="v13")
        assert loaded.version == "v13"
        assert dict(loaded.entries) == dict(table.entries)

    def test_file_round_trip(self, table, tmp_path):
        path = str(tmp_path / "v13.txt")
        table.save(path)
        assert StrategyTable.from_file(path).lookup(["crane", "crash"]) == ("crane", 1.0)

    def test_comments_and_blanks_ignored(self):
        blob = "# built offline\n\nwordle-strategy 1 t\n2:a:b crane 1.0\n"
        assert len(StrategyTable.from_bytes(blob)) == 1

    def test_pickle(self, table):
        clone = pickle.loads(pickle.dumps(table))
        assert clone.version == table.version
        assert dict(clone.entries) == dict(table.entries)

    def test_bad_version_tag(self):
        with pytest.raises(ValueError):
            StrategyTable({}, "has space")
        with pytest.raises(ValueError):
            StrategyTable({}, "")


class TestMalformed:
    def test_version_mismatch(self, table):
        with pytest.raises(MalformedStrategy, match="v12"):
            StrategyTable.from_bytes(table.to_bytes(), expected_version="v12")

    @pytest.mark.parametrize("blob", [
        b"",
        b"not-a-table 1 v1\n",
        b"wordle-strategy 2 v1\n",
        b"wordle-strategy 1\n",
        b"wordle-strategy 1 v1\nkey crane\n",
        b"wordle-strategy 1 v1\nkey cr4ne 1.0\n",
        b"wordle-strategy 1 v1\nkey crane high\n",
        b"\xff\xfe",
    ])
    def test_rejected(self, blob):
        with pytest.raises(MalformedStrategy):
            StrategyTable.from_bytes(blob)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            StrategyTable.from_bytes(b"junk")
