import json
from datetime import datetime, timedelta, timezone

import pytest

from src.api.json_store import JsonFileRepository
from src.api.models import StyleConfig
from src.api.schemas import CountdownCreate, CountdownUpdate


def create_payload(title="Launch", **style) -> CountdownCreate:
    target = datetime.now(timezone.utc) + timedelta(days=7)
    return CountdownCreate.model_validate({"title": title, "targetDate": target.isoformat(), "style": style})


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "nested" / "countdowns.json"


class TestJsonFileRepository:
    def test_missing_file_starts_empty(self, data_file):
        repo = JsonFileRepository(str(data_file))
        assert repo.list() == []
        assert not data_file.exists()

    def test_create_writes_camel_case_records(self, data_file):
        repo = JsonFileRepository(str(data_file))
        created = repo.create(create_payload(backgroundColor="#0A0B0C"))

        records = json.loads(data_file.read_text(encoding="utf-8"))
        assert len(records) == 1
        record = records[0]
        assert record["id"] == created["id"]
        assert record["title"] == "Launch"
        assert record["style"]["backgroundColor"] == "#0A0B0C"
        assert set(record) == {"id", "title", "targetDate", "style", "createdAt", "updatedAt"}

    def test_reload_round_trips_entities(self, data_file):
        repo = JsonFileRepository(str(data_file))
        created = repo.create(create_payload(textColor="#FEDCBA", fontSize=80))

        reloaded = JsonFileRepository(str(data_file)).get(created["id"])
        assert reloaded == created

    def test_update_and_delete_persist(self, data_file):
        repo = JsonFileRepository(str(data_file))
        keep = repo.create(create_payload(title="Keep"))
        drop = repo.create(create_payload(title="Drop"))

        repo.update(keep["id"], CountdownUpdate.model_validate({"style": {"fontSize": 100}}))
        assert repo.delete(drop["id"]) is True
        assert repo.delete(drop["id"]) is False

        reloaded = JsonFileRepository(str(data_file))
        assert [c["id"] for c in reloaded.list()] == [keep["id"]]
        assert reloaded.get(keep["id"])["style"].font_size == 100

    def test_loads_records_with_utc_z_suffix(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text(
            json.dumps(
                [
                    {
                        "id": "lq8x2k9abc",
                        "title": "Vacances",
                        "targetDate": "2030-07-01T10:00:00.000Z",
                        "style": {"backgroundColor": "#ffffff", "textColor": "#000000", "fontSize": 48, "fontFamily": "Arial"},
                        "createdAt": "2025-01-01T09:00:00.000Z",
                    }
                ]
            ),
            encoding="utf-8",
        )
        entity = JsonFileRepository(str(data_file)).get("lq8x2k9abc")
        assert entity is not None
        assert entity["target_date"] == datetime(2030, 7, 1, 10, 0, tzinfo=timezone.utc)
        assert entity["updated_at"] == entity["created_at"]
        assert entity["style"] == StyleConfig()

    def test_corrupt_file_raises(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileRepository(str(data_file))

    def test_non_list_document_raises(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileRepository(str(data_file))

    def test_failed_write_leaves_store_unchanged(self, tmp_path):
        target = tmp_path / "store"
        repo = JsonFileRepository(str(target))
        target.mkdir()

        with pytest.raises(OSError):
            repo.create(create_payload())
        assert repo.list() == []

    def test_failed_update_and_delete_roll_back(self, data_file):
        repo = JsonFileRepository(str(data_file))
        created = repo.create(create_payload(title="Stable"))

        data_file.unlink()
        data_file.mkdir()

        with pytest.raises(OSError):
            repo.update(created["id"], CountdownUpdate.model_validate({"title": "Changed"}))
        with pytest.raises(OSError):
            repo.delete(created["id"])
        assert repo.list() == [created]
