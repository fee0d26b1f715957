"""GitHub Actions output helpers."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from path_delta.delta.models import DeltaResult

logger = logging.getLogger(__name__)


class GitHubOutput:
    """Appends step outputs to the file named by ``GITHUB_OUTPUT``.

    A missing path or an unwritable file is logged and otherwise ignored, so
    the outcome of the run never depends on the output channel.
    """

    def __init__(self, path: str | None):
        self.path = path

    def write(self, key: str, value: str) -> bool:
        """Write a key-value pair to the output file.

        Multiline values use the heredoc syntax understood by the runner.

        Args:
            key: Output variable name
            value: Output value

        Returns:
            True if the value was written, False otherwise
        """
        if not self.path:
            logger.warning(f"GITHUB_OUTPUT is not set, skipping output {key}")
            return False

        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{key}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{key}={value}\n"

        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.warning(f"Failed to write output {key} to {self.path}: {e}")
            return False
        return True


def publish_result(result: DeltaResult, sink: GitHubOutput) -> None:
    """Publish a delta result as ``is_detected`` and ``delta_files`` outputs.

    ``delta_files`` is only written when something was detected.
    """
    sink.write("is_detected", "true" if result.detected else "false")
    if result.detected:
        sink.write("delta_files", json.dumps(result.files, separators=(",", ":")))
