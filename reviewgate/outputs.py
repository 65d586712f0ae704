"""GitHub Actions glue: read the event payload, write step outputs."""

import json
import uuid
from pathlib import Path
from typing import Any, Dict

from reviewgate.models import TriggerDecision


def load_event_payload(path: Path) -> Dict[str, Any]:
    """Read the webhook payload JSON (GITHUB_EVENT_PATH)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"event payload in {path} is not a JSON object")
    return data


def decision_outputs(decision: TriggerDecision) -> Dict[str, str]:
    """Flatten decision into step output strings."""
    files = decision.scope.matched_paths if decision.scope is not None else ()
    return {
        "should_run": "true" if decision.should_run else "false",
        "turn_budget": str(decision.turn_budget) if decision.turn_budget is not None else "",
        "file_count": str(decision.file_count),
        "files": "\n".join(files),
        "kind": decision.kind.value if decision.kind is not None else "",
        "reason": decision.reason,
    }


def write_github_output(outputs: Dict[str, str], path: Path) -> None:
    """Append outputs to the GITHUB_OUTPUT file.

    Multi-line values use the name<<DELIMITER form.
    """
    lines = []
    for name, value in outputs.items():
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            lines.append(f"{name}<<{delimiter}\n{value}\n{delimiter}")
        else:
            lines.append(f"{name}={value}")
    with open(path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
