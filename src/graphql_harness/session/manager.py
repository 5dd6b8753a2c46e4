"""Session persistence for harness runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

from ..constants import REPORT_FILENAME, RESULTS_ROOT

if TYPE_CHECKING:
    from ..orchestrator import RunReport


def _sanitize(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name).strip("_")


class SessionManager:
    """Writes one ``report.json`` per run into its own session directory.

    ```
    results/
      graphqlzero_20240101_120000/report.json
      graphqlzero_20240101_120000_2/report.json
    ```
    """

    def __init__(self, results_root: Union[str, Path] = RESULTS_ROOT):
        self.results_root = Path(results_root)
        self.results_root.mkdir(parents=True, exist_ok=True)

    def create_session_dir(self, name: str) -> Path:
        """Create a fresh directory for ``name``, suffixing ``_2``, ``_3``... on collision."""
        base = _sanitize(name) or "session"
        dir_name, counter = base, 1
        while True:
            session_dir = self.results_root / dir_name
            try:
                session_dir.mkdir(parents=True)
                return session_dir
            except FileExistsError:
                counter += 1
                dir_name = f"{base}_{counter}"

    def save_report(
        self,
        session_dir: Path,
        report: "RunReport",
        metadata: Optional[dict[str, Any]] = None,
    ) -> Path:
        """Write the report (plus run metadata such as the endpoint) as JSON.

        Returns:
            Path to the written file
        """
        payload = report.to_dict()
        if metadata:
            payload["metadata"] = metadata
        payload["saved_at"] = datetime.now(timezone.utc).isoformat()

        report_path = Path(session_dir) / REPORT_FILENAME
        report_path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        return report_path

    def load_report(self, session_dir: Union[str, Path]) -> dict[str, Any]:
        return json.loads((Path(session_dir) / REPORT_FILENAME).read_text(encoding="utf-8"))
