from datetime import datetime, timezone

import pytest

from tdquery.backend import FileSystemBackend
from tdquery.io import JobConfig, RetryPolicy, TdJob
from tdquery.types import TaskIdentity

from tests.dummy_client import DummyJobClient


@pytest.fixture
def identity() -> TaskIdentity:
    return TaskIdentity(
        session_id="2026-10-19",
        attempt_id=1,
        task_name="+daily+query",
        session_time=datetime(2026, 10, 19, tzinfo=timezone.utc),
    )


@pytest.fixture
def fast_retry() -> RetryPolicy:
    return RetryPolicy(min_interval=0, max_interval=0, max_tries=3)


@pytest.fixture
def backend(tmp_path) -> FileSystemBackend:
    return FileSystemBackend(base_path=tmp_path / "state")


@pytest.fixture
def client() -> DummyJobClient:
    return DummyJobClient()


@pytest.fixture
def make_job(tmp_path, client, backend, identity, fast_retry):
    def _make_job(query: str = "SELECT 1", **options) -> TdJob:
        options.setdefault("database", "def")
        cfg = JobConfig.model_validate(
            dict(
                query=query,
                poll_interval=0,
                retry=fast_retry,
                workspace=tmp_path,
                **options,
            )
        )
        return TdJob(cfg=cfg, client=client, backend=backend, identity=identity)

    return _make_job
