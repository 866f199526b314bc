import json
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest

from credstore.storage import JSONFileStorage


def write_document(path: Path, document) -> Path:
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def read_document(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    """An empty, valid storage document in a temporary directory."""
    return write_document(tmp_path / "storage.json", {"users": {}})


@pytest.fixture()
def storage(storage_path: Path) -> JSONFileStorage:
    return JSONFileStorage(storage_path)


@pytest.fixture()
def secret_key(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.delenv("CREDSTORE_SECRET_KEY", raising=False)
