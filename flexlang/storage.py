"""Persisted program records.

`ProgramStore` keeps every saved program in one JSON file inside a
directory. Records are keyed by a generated identifier and program names
are unique within a store: saving under an existing name replaces that
record's source, and renaming onto a taken name is refused.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional
import json
import uuid

STORE_FILE = 'programs.json'


class StorageError(Exception):
    pass


@dataclass
class ProgramRecord:
    identifier: str
    name: str
    source: str
    last_modified: str


def now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProgramStore:
    def __init__(self, directory):
        self.directory = Path(directory)
        self.path = self.directory / STORE_FILE

    def _load(self) -> Dict[str, ProgramRecord]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"cannot read {self.path}: {e}") from e
        return {item['identifier']: ProgramRecord(**item) for item in data}

    def _dump(self, records: Dict[str, ProgramRecord]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([asdict(r) for r in records.values()], f, ensure_ascii=False, indent=2)

    def save(self, name: str, source: str) -> ProgramRecord:
        """Save ``source`` under ``name``, replacing a record with that name."""
        if not name.strip():
            raise StorageError('program name must not be empty')
        records = self._load()
        existing = self._by_name(records, name)
        identifier = existing.identifier if existing else uuid.uuid4().hex
        record = ProgramRecord(identifier, name, source, now())
        records[identifier] = record
        self._dump(records)
        return record

    def get(self, identifier: str) -> Optional[ProgramRecord]:
        return self._load().get(identifier)

    def find(self, name: str) -> Optional[ProgramRecord]:
        return self._by_name(self._load(), name)

    def list(self) -> List[ProgramRecord]:
        """All records, most recently modified first."""
        return sorted(self._load().values(), key=lambda r: r.last_modified, reverse=True)

    def rename(self, identifier: str, new_name: str) -> ProgramRecord:
        records = self._load()
        record = records.get(identifier)
        if record is None:
            raise StorageError(f"no program with id {identifier}")
        other = self._by_name(records, new_name)
        if other is not None and other.identifier != identifier:
            raise StorageError(f"a program named {new_name!r} already exists")
        record.name = new_name
        record.last_modified = now()
        self._dump(records)
        return record

    def delete(self, identifier: str) -> Optional[str]:
        """Delete a record. Returns the deleted program's name, or None."""
        records = self._load()
        record = records.pop(identifier, None)
        if record is None:
            return None
        self._dump(records)
        return record.name

    @staticmethod
    def _by_name(records: Dict[str, ProgramRecord], name: str) -> Optional[ProgramRecord]:
        for record in records.values():
            if record.name == name:
                return record
        return None
