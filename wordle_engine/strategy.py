"""
Strategy Table
==============

A precomputed, read-only lookup from game state to recommended guess.

State is identified by the candidate set alone, so a table can be consulted
no matter which guesses led to that set. Tables are built offline by
``simulator.build_strategy_table`` and stored as UTF-8 text:

    wordle-strategy 1 v13
    2315:aback:5f1c3e0d9a2b salet 5.834582
    ...

Blank lines and lines starting with '#' are ignored.
"""

import hashlib
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from .config import CONFIG
from .errors import MalformedStrategy

MAGIC = "wordle-strategy"
FORMAT = CONFIG["strategy_format"]


def state_key(candidates: Sequence[str]) -> str:
    """Canonical key for a candidate set: count, first word and a digest."""
    ordered = sorted(candidates)
    digest = hashlib.sha1(','.join(ordered).encode('ascii')).hexdigest()[:12]
    first = ordered[0] if ordered else '-'
    return f"{len(ordered)}:{first}:{digest}"


class StrategyTable:
    """Immutable mapping of state key -> (guess, score)."""

    def __init__(self, entries: Mapping[str, Tuple[str, float]], version: str):
        if not version or any(c.isspace() for c in version):
            raise ValueError(f"Invalid version tag: {version!r}")
        self._entries = MappingProxyType(dict(entries))
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    @property
    def entries(self) -> Mapping[str, Tuple[str, float]]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def lookup(self, candidates: Sequence[str]) -> Optional[Tuple[str, float]]:
        """Recommended (guess, score) for this candidate set, or None."""
        return self._entries.get(state_key(candidates))

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        lines = [f"{MAGIC} {FORMAT} {self._version}"]
        for key in sorted(self._entries):
            guess, value = self._entries[key]
            lines.append(f"{key} {guess} {value:.6f}")
        return ('\n'.join(lines) + '\n').encode('utf-8')

    @classmethod
    def from_bytes(cls, blob: Union[bytes, str],
                   expected_version: Optional[str] = None) -> "StrategyTable":
        """
        Parse a strategy table blob.

        Raises:
            MalformedStrategy: bad header or entry, unsupported format, or a
                version tag different from expected_version
        """
        if isinstance(blob, bytes):
            try:
                blob = blob.decode('utf-8')
            except UnicodeDecodeError as e:
                raise MalformedStrategy(f"strategy table is not UTF-8 text ({e})") from e

        lines = [(n, line.strip()) for n, line in enumerate(blob.splitlines(), 1)]
        lines = [(n, line) for n, line in lines if line and not line.startswith('#')]
        if not lines:
            raise MalformedStrategy("strategy table is empty")

        _, header = lines[0]
        parts = header.split()
        if len(parts) != 3 or parts[0] != MAGIC:
            raise MalformedStrategy(f"bad strategy table header: '{header}'")
        if parts[1] != str(FORMAT):
            raise MalformedStrategy(f"unsupported strategy format {parts[1]} (expected {FORMAT})")
        version = parts[2]
        if expected_version is not None and version != expected_version:
            raise MalformedStrategy(
                f"strategy table version '{version}' != expected '{expected_version}'"
            )

        entries: Dict[str, Tuple[str, float]] = {}
        for line_number, line in lines[1:]:
            fields = line.split()
            if len(fields) != 3:
                raise MalformedStrategy(f"line {line_number}: expected 'key guess score', got '{line}'")
            key, guess, value = fields
            if not (guess.isascii() and guess.isalpha() and guess.islower()):
                raise MalformedStrategy(f"line {line_number}: '{guess}' is not a word")
            try:
                entries[key] = (guess, float(value))
            except ValueError:
                raise MalformedStrategy(f"line {line_number}: '{value}' is not a number") from None

        return cls(entries, version)

    @classmethod
    def from_file(cls, filepath: str, expected_version: Optional[str] = None) -> "StrategyTable":
        with open(filepath, 'rb') as f:
            return cls.from_bytes(f.read(), expected_version)

    def save(self, filepath: str) -> None:
        with open(filepath, 'wb') as f:
            f.write(self.to_bytes())

    def __reduce__(self):
        # mappingproxy does not pickle
        return (StrategyTable, (dict(self._entries), self._version))

    def __repr__(self) -> str:
        return f"StrategyTable(version={self._version!r}, entries={len(self._entries)})"
