"""
Tests for the file-backed request store

Tests cover:
- Save, load and list ordering
- Skipping unreadable files
- Id validation
- Delete semantics
"""
import json

import pytest

from tuiman.core.models.request import Request
from tuiman.core.request_store import RequestStore, is_safe_id
from tuiman.utils.errors import InvalidRequestIdError, RequestNotFoundError


class TestSaveAndLoad:
    """Tests for persisting single requests"""

    def test_save_stamps_updated_at(self, store):
        """Test the stored copy carries a timestamp"""
        stored = store.save(Request(id="one", name="One", url="https://a.test"))
        assert stored.updated_at.endswith("Z")

    def test_load_returns_saved_request(self, store):
        """Test a saved request loads back field for field"""
        stored = store.save(Request(id="one", name="One", body='{"a": 1}'))
        assert store.load("one") == stored

    def test_file_layout(self, store, app_paths):
        """Test one JSON document per request named after the id"""
        store.save(Request(id="one", name="One"))
        path = app_paths.requests_dir / "one.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["id"] == "one"
        assert set(data) >= {"name", "method", "url", "auth_secret_ref", "updated_at"}
        assert not list(app_paths.requests_dir.glob("*.tmp"))

    def test_save_overwrites_by_id(self, store):
        """Test saving the same id replaces the document"""
        store.save(Request(id="one", name="Before"))
        store.save(Request(id="one", name="After"))
        assert [r.name for r in store.list()] == ["After"]

    def test_load_missing_raises(self, store):
        """Test loading an unknown id"""
        with pytest.raises(RequestNotFoundError):
            store.load("missing")


class TestList:
    """Tests for listing the collection"""

    def test_sorted_case_insensitively(self, store, sample_requests):
        """Test list order ignores case"""
        assert [r.name for r in store.list()] == ["Alpha users", "beta create", "Gamma delete"]

    def test_missing_directory_is_empty(self, tmp_path):
        """Test a store with no directory lists nothing"""
        assert RequestStore(tmp_path / "nowhere").list() == []

    def test_unreadable_files_are_skipped(self, store, app_paths, sample_requests):
        """Test broken documents do not hide the rest"""
        (app_paths.requests_dir / "broken.json").write_text("{not json", encoding="utf-8")
        (app_paths.requests_dir / "array.json").write_text("[1, 2]", encoding="utf-8")
        assert len(store.list()) == 3

    def test_missing_id_gets_generated(self, store, app_paths):
        """Test a document without an id still lists"""
        (app_paths.requests_dir / "legacy.json").write_text(
            json.dumps({"name": "Legacy", "url": "https://a.test"}), encoding="utf-8"
        )
        [request] = store.list()
        assert request.name == "Legacy"
        assert request.id


class TestIdValidation:
    """Tests for ids used as file names"""

    @pytest.mark.parametrize("request_id", ["", ".", "..", "../escape", "a/b", "a b"])
    def test_unsafe_ids_rejected(self, store, request_id):
        """Test ids that are not plain file names"""
        assert not is_safe_id(request_id)
        with pytest.raises(InvalidRequestIdError):
            store.save(Request(id=request_id))

    def test_uuid_is_safe(self):
        """Test generated ids are usable"""
        assert is_safe_id(Request().id)


class TestDelete:
    """Tests for deleting requests"""

    def test_delete_removes_file(self, store, sample_requests):
        """Test a deleted request is gone from the list"""
        store.delete("req-beta")
        assert [r.id for r in store.list()] == ["req-alpha", "req-gamma"]

    def test_delete_missing_is_ok(self, store):
        """Test deleting an unknown id does not raise"""
        store.delete("never-saved")
