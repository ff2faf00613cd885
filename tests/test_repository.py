"""Tests for the stored document repository."""

import io
import json
from contextlib import contextmanager
from types import SimpleNamespace

import pytest
from sqlalchemy import text

from utils.strategic_performance import repository
from utils.strategic_performance.repository import StrategicRepository


@pytest.fixture
def repo(sqlite_engine):
    return StrategicRepository(engine=sqlite_engine, doc_id="test_doc")


def test_missing_document_loads_empty(repo):
    assert repo.load_document() is None
    data = repo.load()
    assert data.indicators == ()
    assert data.global_semaphore is not None


def test_save_and_load_document(repo, sample_document):
    repo.save_document(sample_document)
    assert repo.load_document() == sample_document

    sample_document["identity"]["companyName"] = "ACME 2"
    repo.save_document(sample_document)
    assert repo.load().company_name == "ACME 2"

    with repo.engine.connect() as conn:
        count = conn.execute(text("SELECT COUNT(*) FROM kpi_system")).scalar()
    assert count == 1


def test_save_keeps_unmodelled_sections(repo, sample_document, sample_data):
    sample_document["users"] = [{"name": "admin"}]
    repo.save_document(sample_document)

    repo.save(sample_data)

    stored = repo.load_document()
    assert stored["users"] == [{"name": "admin"}]
    assert stored["identity"] == {"companyName": "ACME", "vision": "Ser referência"}
    assert repo.load() == sample_data


def test_corrupted_payload_raises(repo):
    with repo.engine.begin() as conn:
        conn.execute(
            text("INSERT INTO kpi_system (doc_id, payload, updated_at) VALUES ('test_doc', '{oops', '')")
        )
    with pytest.raises(ValueError):
        repo.load_document()


def test_documents_are_isolated_by_id(sqlite_engine, sample_document):
    StrategicRepository(engine=sqlite_engine, doc_id="a").save_document(sample_document)
    assert StrategicRepository(engine=sqlite_engine, doc_id="b").load_document() is None


# =============================================================================
# BACKUPS
# =============================================================================

def test_read_backup_sources(tmp_path, sample_document):
    raw = json.dumps(sample_document)
    path = tmp_path / "kpi_database_backup.json"
    path.write_text(raw, encoding="utf-8")

    from_path = StrategicRepository.read_backup(path)
    from_str = StrategicRepository.read_backup(str(path))
    from_bytes = StrategicRepository.read_backup(raw.encode("utf-8"))
    from_file = StrategicRepository.read_backup(io.BytesIO(raw.encode("utf-8")))

    assert from_path == from_str == from_bytes == from_file
    assert len(from_path.indicators) == 3


@pytest.mark.parametrize("payload", [b"{not json", b"[1, 2, 3]"])
def test_read_backup_rejects_bad_payload(payload):
    with pytest.raises(ValueError):
        StrategicRepository.read_backup_document(payload)


def test_import_backup_replaces_document(repo, sample_document):
    repo.save_document({"perspectives": [{"id": "old", "name": "Old"}]})

    data = repo.import_backup(json.dumps(sample_document).encode("utf-8"))

    assert len(data.indicators) == 3
    assert repo.load_document() == sample_document


def test_save_document_recovers_from_concurrent_insert(repo, monkeypatch):
    # Another session created the row between our UPDATE and INSERT
    repo.save_document({"perspectives": [{"id": "old", "name": "Old"}]})
    real_transaction = repository.get_transaction
    calls = []

    class StaleUpdateConnection:
        def __init__(self, conn):
            self.conn = conn

        def execute(self, statement, params=None):
            if statement is repository._UPDATE_DOCUMENT:
                return SimpleNamespace(rowcount=0)
            return self.conn.execute(statement, params)

    @contextmanager
    def racing_transaction(engine=None):
        calls.append(engine)
        with real_transaction(engine) as conn:
            yield StaleUpdateConnection(conn) if len(calls) == 1 else conn

    monkeypatch.setattr(repository, "get_transaction", racing_transaction)

    repo.save_document({"perspectives": [{"id": "new", "name": "Nova"}]})

    assert len(calls) == 2
    assert repo.load_document() == {"perspectives": [{"id": "new", "name": "Nova"}]}
