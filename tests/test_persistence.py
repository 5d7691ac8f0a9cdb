"""Tests for persisted state."""

import os
import stat
from datetime import datetime, timezone

import pytest

from vsg.errors import StorageError
from vsg.models import Gender, User
from vsg.persistence import (
    AUTH_KEY,
    PROJECTS_KEY,
    MemoryBackend,
    YamlFileBackend,
    decode_projects,
    decode_timestamp,
    decode_user,
    encode_projects,
    encode_timestamp,
    encode_user,
    open_project_store,
    open_user_store,
)


@pytest.fixture
def populated(store, draft):
    project = store.create_project(draft)
    store.add_scene(project.id)
    store.update_scene(project.id, project.scenes[0].id, {
        "script": "Steam rises from the cup",
        "voiceOver": {"gender": "female", "text": "Good morning"},
    })
    return store


class TestTimestamps:

    def test_encodes_utc_with_microseconds(self):
        value = datetime(2024, 3, 5, 8, 30, 0, 1234, tzinfo=timezone.utc)
        assert encode_timestamp(value) == "2024-03-05T08:30:00.001234+00:00"

    def test_naive_is_treated_as_utc(self):
        assert encode_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000000+00:00"

    def test_decodes_javascript_format(self):
        value = decode_timestamp("2024-03-05T08:30:00.123Z")
        assert value == datetime(2024, 3, 5, 8, 30, 0, 123000, tzinfo=timezone.utc)

    def test_round_trip_is_exact(self):
        value = datetime(2024, 3, 5, 8, 30, 0, 999999, tzinfo=timezone.utc)
        assert decode_timestamp(encode_timestamp(value)) == value

    @pytest.mark.parametrize("value", ["yesterday", 12, None])
    def test_rejects_garbage(self, value):
        with pytest.raises(StorageError):
            decode_timestamp(value)


class TestProjectCodec:

    def test_round_trip(self, populated):
        payload = encode_projects(populated.projects, populated.current_project_id)

        projects, current_id = decode_projects(payload)

        assert projects == list(populated.projects)
        assert current_id == populated.current_project_id
        assert projects[0].scenes[0].voice_over.gender == Gender.FEMALE

    def test_uses_camel_case_labels(self, populated):
        payload = encode_projects(populated.projects, populated.current_project_id)
        assert payload["version"] == 1
        data = payload["state"]["projects"][0]
        assert "targetAudience" in data
        assert "voiceOver" in data["scenes"][0]
        assert data["createdAt"].endswith("+00:00")

    def test_nothing_stored(self):
        assert decode_projects(None) == ([], None)

    def test_migrates_version_zero(self, populated):
        project = populated.projects[0]
        v1 = encode_projects(populated.projects, project.id)
        project_data = v1["state"]["projects"][0]
        project_data["createdAt"] = "2024-01-01T12:00:01.000Z"
        v0 = {"version": 0, "state": {"projects": [project_data], "currentProject": project_data}}

        projects, current_id = decode_projects(v0)

        assert current_id == project.id
        assert projects[0].created_at == datetime(2024, 1, 1, 12, 0, 1, tzinfo=timezone.utc)

    def test_project_without_scenes_gets_one(self, populated):
        payload = encode_projects(populated.projects, None)
        payload["state"]["projects"][0]["scenes"] = []
        projects, _ = decode_projects(payload)
        assert len(projects[0].scenes) == 1

    def test_scene_order_and_ids_are_repaired(self, populated):
        payload = encode_projects(populated.projects, None)
        scenes = payload["state"]["projects"][0]["scenes"]
        first, second = scenes
        first["order"], second["order"] = 5, 2
        scenes.append(dict(second, script="copy", order=9))

        projects, _ = decode_projects(payload)

        decoded = projects[0].scenes
        assert [s.id for s in decoded] == [second["id"], first["id"]]
        assert [s.order for s in decoded] == [0, 1]

    def test_unknown_version(self):
        with pytest.raises(StorageError):
            decode_projects({"version": 99, "state": {}})

    def test_invalid_project(self, populated):
        payload = encode_projects(populated.projects, None)
        del payload["state"]["projects"][0]["title"]
        with pytest.raises(StorageError):
            decode_projects(payload)


class TestUserCodec:

    def test_round_trip(self):
        user = User(name="Ada", email="ada@example.com", api_key="secret-key")
        assert decode_user(encode_user(user)) == user

    def test_signed_out(self):
        assert decode_user(encode_user(None)) is None

    def test_version_zero(self):
        user = {"id": "u1", "name": "Ada", "email": "ada@example.com", "apiKey": ""}
        assert decode_user({"version": 0, "state": {"user": user, "isAuthenticated": True}}).api_key is None
        assert decode_user({"version": 0, "state": {"user": user, "isAuthenticated": False}}) is None


class TestBackends:

    def test_memory_backend_copies_values(self):
        backend = MemoryBackend()
        value = {"a": [1]}
        backend.set("k", value)
        value["a"].append(2)
        assert backend.get("k") == {"a": [1]}
        backend.remove("k")
        backend.remove("k")
        assert backend.get("k") is None

    def test_yaml_backend(self, tmp_path):
        backend = YamlFileBackend(tmp_path / "data")
        assert backend.get("state") is None

        backend.set("state", {"b": 1, "a": "x"})

        path = backend.path_for("state")
        assert path.exists()
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert backend.get("state") == {"b": 1, "a": "x"}
        assert [p.name for p in path.parent.iterdir()] == ["state.yaml"]

        backend.remove("state")
        assert not path.exists()

    def test_yaml_backend_rejects_bad_keys(self, tmp_path):
        with pytest.raises(ValueError):
            YamlFileBackend(tmp_path).path_for("../escape")

    def test_yaml_backend_unreadable_file(self, tmp_path):
        (tmp_path / "state.yaml").write_text("a: [unclosed", encoding="utf-8")
        with pytest.raises(StorageError):
            YamlFileBackend(tmp_path).get("state")


class TestOpenStores:

    def test_project_store_persists_and_reloads(self, tmp_path, draft):
        backend = YamlFileBackend(tmp_path)
        store = open_project_store(backend)
        project = store.create_project(draft)
        project = store.update_scene(project.id, project.scenes[0].id, {"script": "Hello"})

        reloaded = open_project_store(YamlFileBackend(tmp_path))

        assert reloaded.projects == (project,)
        assert reloaded.current_project == project

    def test_noop_does_not_write(self, draft):
        backend = MemoryBackend()
        store = open_project_store(backend)
        store.delete_project("missing")
        assert backend.get(PROJECTS_KEY) is None

    def test_user_store_persists(self):
        backend = MemoryBackend()
        store = open_user_store(backend)
        store.register("Ada", "ada@example.com")
        store.save_api_key("secret-key")

        reloaded = open_user_store(backend)

        assert reloaded.user.email == "ada@example.com"
        assert reloaded.api_key == "secret-key"
        assert backend.get(AUTH_KEY)["version"] == 1
