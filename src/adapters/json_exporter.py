"""JSON export of a run report.

Why JSON:
- Interoperability with other tools and CI pipelines.
- Keeps a record of timings/status codes without re-sending the requests.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import RunReport


def export_run_report(*, report: RunReport, output_path: Path) -> Path:
    """Export `RunReport` as UTF-8 JSON with a stable layout.

    Request bodies are left out (they may be binary); their size is kept.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json", exclude={"requests": {"__all__": {"body"}}})
    for dumped, request in zip(payload["requests"], report.requests):
        dumped["body_size"] = len(request.body) if request.body is not None else 0
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
