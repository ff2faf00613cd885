# utils/strategic_performance/repository.py
"""
Stored document access for Strategic Performance

The whole strategic map (perspectives, objectives, indicators, goals,
global settings) lives in one JSON document, keyed by document id, in the
kpi_system table:

    kpi_system(doc_id TEXT PRIMARY KEY, payload TEXT, updated_at TEXT)

Also reads the JSON backup files produced by the browser application
(kpi_database_backup.json) so they can be imported.

Usage:
    repo = StrategicRepository()
    data = repo.load()
    repo.save(data)
    data = repo.import_backup("kpi_database_backup.json")
"""

import json
import logging
from datetime import datetime
from io import IOBase
from pathlib import Path
from typing import Dict, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..config import config
from ..db import ensure_document_table, execute_query, get_db_engine, get_transaction
from .constants import DEFAULT_DOCUMENT_ID, DOCUMENT_TABLE
from .models import StrategicData
from .serializers import strategic_data_from_dict, strategic_data_to_dict

logger = logging.getLogger(__name__)

_UPDATE_DOCUMENT = text(
    f"UPDATE {DOCUMENT_TABLE} SET payload = :payload, updated_at = :updated_at "
    f"WHERE doc_id = :doc_id"
)
_INSERT_DOCUMENT = text(
    f"INSERT INTO {DOCUMENT_TABLE} (doc_id, payload, updated_at) "
    f"VALUES (:doc_id, :payload, :updated_at)"
)

BackupSource = Union[str, Path, bytes, IOBase]


class StrategicRepository:
    """Load and save the strategic document through SQLAlchemy."""

    def __init__(self, engine: Optional[Engine] = None, doc_id: Optional[str] = None):
        self.engine = engine or get_db_engine()
        self.doc_id = doc_id or config.get_app_setting("DOCUMENT_ID", DEFAULT_DOCUMENT_ID)
        ensure_document_table(self.engine)

    # =========================================================================
    # LOAD
    # =========================================================================

    def load_document(self) -> Optional[Dict]:
        """Raw stored document, or None when nothing was saved yet."""
        rows = execute_query(
            f"SELECT payload FROM {DOCUMENT_TABLE} WHERE doc_id = :doc_id",
            {"doc_id": self.doc_id},
            engine=self.engine
        )

        if not rows:
            logger.info(f"Document '{self.doc_id}' not found, starting empty")
            return None

        try:
            return json.loads(rows[0]["payload"])
        except json.JSONDecodeError as e:
            logger.error(f"❌ Stored document '{self.doc_id}' is not valid JSON: {e}")
            raise ValueError(f"Stored document '{self.doc_id}' is corrupted") from e

    def load(self) -> StrategicData:
        return strategic_data_from_dict(self.load_document())

    # =========================================================================
    # SAVE
    # =========================================================================

    def save_document(self, document: Dict) -> None:
        payload = json.dumps(document, ensure_ascii=False)
        params = {
            "doc_id": self.doc_id,
            "payload": payload,
            "updated_at": datetime.now().isoformat(timespec="seconds"),
        }

        try:
            with get_transaction(self.engine) as conn:
                if conn.execute(_UPDATE_DOCUMENT, params).rowcount == 0:
                    conn.execute(_INSERT_DOCUMENT, params)
        except IntegrityError:
            # Another session inserted the row first
            logger.warning(f"Concurrent insert of '{self.doc_id}', updating instead")
            with get_transaction(self.engine) as conn:
                conn.execute(_UPDATE_DOCUMENT, params)

        logger.info(f"💾 Saved document '{self.doc_id}' ({len(payload)} bytes)")

    def save(self, data: StrategicData) -> None:
        """
        Save StrategicData, keeping document sections this module does not
        model (identity details, vision line, users) untouched.
        """
        document = self.load_document() or {}
        updated = strategic_data_to_dict(data)
        identity = dict(document.get("identity") or {})
        identity.update(updated.pop("identity"))
        document.update(updated)
        document["identity"] = identity
        self.save_document(document)

    # =========================================================================
    # BACKUP FILES
    # =========================================================================

    @staticmethod
    def read_backup_document(source: BackupSource) -> Dict:
        """Parse a JSON backup from a path, raw bytes or a file object."""
        if isinstance(source, (str, Path)):
            raw = Path(source).read_text(encoding="utf-8")
        elif isinstance(source, bytes):
            raw = source.decode("utf-8")
        else:
            raw = source.read()
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Backup is not valid JSON: {e}")
            raise ValueError(f"Backup is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ValueError("Backup must contain a JSON object")
        return document

    @classmethod
    def read_backup(cls, source: BackupSource) -> StrategicData:
        return strategic_data_from_dict(cls.read_backup_document(source))

    def import_backup(self, source: BackupSource) -> StrategicData:
        """Replace the stored document with a backup and return it parsed."""
        document = self.read_backup_document(source)
        data = strategic_data_from_dict(document)
        self.save_document(document)
        logger.info(f"📥 Imported backup into document '{self.doc_id}'")
        return data
