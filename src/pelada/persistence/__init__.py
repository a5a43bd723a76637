"""Document stores: one whole JSON document per entity collection."""

from __future__ import annotations

import copy
import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from pelada.config import Settings
from pelada.errors import StorageFailure


logger = logging.getLogger("uvicorn.error")

PLAYERS = "players"
TEAMS = "teams"
LEDGER = "ledger"
PAYMENTS = "payments"

COLLECTIONS = (PLAYERS, TEAMS, LEDGER, PAYMENTS)


class DocumentStore:
    """Read/write-whole-document semantics per collection.

    There is no locking: callers read, mutate in memory and write back, so
    two interleaved requests on the same collection can lose an update.
    """

    def read(self, collection: str, default: Any) -> Any:
        raise NotImplementedError

    def write(self, collection: str, document: Any) -> None:
        self.write_many({collection: document})

    def write_many(self, documents: Mapping[str, Any]) -> None:
        raise NotImplementedError


class JsonFileStore(DocumentStore):
    """Stores each collection as ``<data_dir>/<collection>.json``."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def read(self, collection: str, default: Any) -> Any:
        path = self._path(collection)
        if not path.exists():
            return copy.deepcopy(default)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read %s; using default", path)
            return copy.deepcopy(default)

    def write_many(self, documents: Mapping[str, Any]) -> None:
        staged: list[tuple[Path, Path]] = []
        backups: dict[Path, bytes | None] = {}
        try:
            for collection, document in documents.items():
                target = self._path(collection)
                fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
                staged.append((Path(tmp_name), target))
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, indent=2, ensure_ascii=False)
            for _, target in staged:
                backups[target] = target.read_bytes() if target.exists() else None
            replaced: list[Path] = []
            try:
                for tmp_path, target in staged:
                    os.replace(tmp_path, target)
                    replaced.append(target)
            except OSError:
                self._restore(replaced, backups)
                raise
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write %s: %s", ", ".join(documents), exc)
            raise StorageFailure("Falha ao gravar os dados.") from exc
        finally:
            for tmp_path, _ in staged:
                tmp_path.unlink(missing_ok=True)

    @staticmethod
    def _restore(replaced: list[Path], backups: Mapping[Path, bytes | None]) -> None:
        for target in replaced:
            previous = backups.get(target)
            try:
                if previous is None:
                    target.unlink(missing_ok=True)
                else:
                    target.write_bytes(previous)
            except OSError:
                logger.exception("Failed to roll back %s", target)


class SqliteDocumentStore(DocumentStore):
    """Stores every collection as a row in a single SQLite file."""

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT PRIMARY KEY,
                    body_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def read(self, collection: str, default: Any) -> Any:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT body_json FROM documents WHERE collection = ?",
                    (collection,),
                ).fetchone()
            if row is None:
                return copy.deepcopy(default)
            return json.loads(row["body_json"])
        except (sqlite3.Error, ValueError):
            logger.exception("Failed to read %s from %s; using default", collection, self.db_path)
            return copy.deepcopy(default)

    def write_many(self, documents: Mapping[str, Any]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            rows = [(collection, json.dumps(document), now) for collection, document in documents.items()]
            with self._connect() as conn:
                conn.executemany(
                    """
                    INSERT INTO documents (collection, body_json, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(collection) DO UPDATE SET
                        body_json = excluded.body_json,
                        updated_at = excluded.updated_at
                    """,
                    rows,
                )
                conn.commit()
        except (sqlite3.Error, TypeError, ValueError) as exc:
            logger.error("Failed to write %s to %s: %s", ", ".join(documents), self.db_path, exc)
            raise StorageFailure("Falha ao gravar os dados.") from exc


def open_store(settings: Settings) -> DocumentStore:
    if settings.db_path is not None:
        return SqliteDocumentStore(settings.db_path)
    return JsonFileStore(settings.data_dir)


__all__ = [
    "COLLECTIONS",
    "LEDGER",
    "PAYMENTS",
    "PLAYERS",
    "TEAMS",
    "DocumentStore",
    "JsonFileStore",
    "SqliteDocumentStore",
    "open_store",
]
