from graphql_harness.constants import REPORT_FILENAME
from graphql_harness.expectations import Verdict
from graphql_harness.orchestrator import RunReport, ScenarioResult
from graphql_harness.results import Success
from graphql_harness.session import SessionManager


def _report() -> RunReport:
    return RunReport(
        run_id="abc123",
        results=[
            ScenarioResult(
                scenario_name="read_album",
                resource="albums",
                category="read",
                verdict=Verdict.passing(),
                result=Success(data={"album": {"id": "1"}}),
            ),
            ScenarioResult(
                scenario_name="delete_album",
                resource="albums",
                category="delete",
                verdict=Verdict.cancelled("Scenario run was cancelled"),
            ),
        ],
    )


def test_session_dirs_are_unique_and_sanitized(tmp_path) -> None:
    manager = SessionManager(tmp_path / "results")

    first = manager.create_session_dir("graphql zero/run")
    second = manager.create_session_dir("graphql zero/run")

    assert first.name == "graphql_zero_run"
    assert second.name == "graphql_zero_run_2"
    assert manager.create_session_dir("///").name == "session"


def test_saved_report_round_trips_with_metadata(tmp_path) -> None:
    manager = SessionManager(tmp_path)
    session_dir = manager.create_session_dir("albums")

    path = manager.save_report(session_dir, _report(), metadata={"endpoint": "https://graphql.test/api"})
    loaded = manager.load_report(session_dir)

    assert path == session_dir / REPORT_FILENAME
    assert loaded["run_id"] == "abc123"
    assert loaded["summary"] == {"total": 2, "passed": 1, "failed": 0, "cancelled": 1}
    assert [entry["outcome"] for entry in loaded["scenarios"]] == ["pass", "cancelled"]
    assert loaded["scenarios"][0]["result"]["data"] == {"album": {"id": "1"}}
    assert loaded["metadata"]["endpoint"] == "https://graphql.test/api"
    assert "saved_at" in loaded
