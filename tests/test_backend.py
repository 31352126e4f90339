import pytest
from pydantic import TypeAdapter

from tdquery.backend import BackendType, FileSystemBackend, MemoryBackend
from tdquery.types import TaskID


TASK = TaskID(namespace="s_a1_task", key="job")


@pytest.fixture(params=["filesystem", "memory"])
def any_backend(request, tmp_path):
    if request.param == "filesystem":
        return FileSystemBackend(base_path=tmp_path / "state")
    return MemoryBackend()


def test_meta(any_backend):
    assert not any_backend.meta_exists(TASK)
    assert any_backend.load_meta(TASK) is None

    any_backend.save_meta(TASK, {"outcome": "1"})
    assert any_backend.meta_exists(TASK)
    assert any_backend.load_meta(TASK) == {"outcome": "1"}


def test_markers(any_backend):
    assert not any_backend.is_done(TASK)
    any_backend.mark_done(TASK)
    assert any_backend.is_done(TASK)
    assert not any_backend.is_done(TaskID(namespace=TASK.namespace, key="download"))


def test_data(any_backend):
    assert not any_backend.data_exists(TASK)
    with pytest.raises((FileNotFoundError, KeyError)):
        any_backend.load_data(TASK)

    rows = [[1, "a", None], [2, "b", 1.5]]
    any_backend.save_data(TASK, rows)
    assert any_backend.data_exists(TASK)
    assert any_backend.load_data(TASK) == rows


def test_filesystem_layout(tmp_path):
    b = FileSystemBackend(base_path=tmp_path)
    b.save_meta(TASK, {})
    b.save_data(TASK, [])
    b.mark_done(TASK)
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "s_a1_task_job.data.json",
        "s_a1_task_job.meta.json",
        "s_a1_task_job.ok",
    ]


def test_backend_type_from_config(tmp_path):
    adapter = TypeAdapter(BackendType)
    b = adapter.validate_python({"type": "filesystem", "base_path": str(tmp_path)})
    assert isinstance(b, FileSystemBackend)
    assert isinstance(adapter.validate_python({"type": "memory"}), MemoryBackend)
