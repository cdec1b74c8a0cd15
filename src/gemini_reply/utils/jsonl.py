"""JSONL file handling utilities."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..models.reply import Reply


def write_jsonl(
    path: Path,
    data: list[dict[str, Any]],
    append: bool = False,
) -> None:
    """Write a list of objects to a JSONL file.

    Args:
        path: Path to the output file.
        data: List of objects to write.
        append: If True, append to existing file instead of overwriting.
    """
    mode = "a" if append else "w"
    with open(path, mode, encoding="utf-8") as f:
        for item in data:
            f.write(json.dumps(item, ensure_ascii=False) + "\n")


def transcript_record(user_input: str, reply: Reply) -> dict[str, Any]:
    """Build the transcript entry for one exchange."""
    return {
        "at": datetime.now(timezone.utc).isoformat(),
        "input": user_input,
        "kind": reply.kind.value,
        "reply": reply.render(),
    }


def append_transcript(path: Path, user_input: str, reply: Reply) -> None:
    """Append one exchange to a JSONL transcript."""
    write_jsonl(path, [transcript_record(user_input, reply)], append=True)
