"""Outward state for later workflow steps.

Saved state (log file path, proxy pid) is read back by the teardown step;
outputs (host, port, CA certificate) are consumed by the job.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles

logger = logging.getLogger(__name__)

LOG_FILE_STATE = "proxy-log-file"
PID_STATE = "proxy-process-pid"

HOST_OUTPUT = "proxy_host"
PORT_OUTPUT = "proxy_port"
CA_CERTIFICATE_OUTPUT = "proxy_ca_certificate"


class ActionState(ABC):
    """Sink for saved state and step outputs."""

    @abstractmethod
    async def save_state(self, name: str, value: str) -> None:
        """Persist a value for a later step of the same action."""
        raise NotImplementedError

    @abstractmethod
    async def set_output(self, name: str, value: str) -> None:
        """Publish a step output."""
        raise NotImplementedError


def format_file_command(name: str, value: str, delimiter: Optional[str] = None) -> str:
    """Render one ``name<<delimiter`` entry of an environment command file.

    Raises:
        ValueError: If the name or value contains the delimiter
    """
    if delimiter is None:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name:
        raise ValueError(f"Unexpected input: name should not contain the delimiter {delimiter!r}")
    if delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter {delimiter!r}")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class FileCommandState(ActionState):
    """Writes state and outputs to the runner's command files."""

    def __init__(self, state_file: Optional[Path] = None, output_file: Optional[Path] = None):
        self.state_file = Path(state_file) if state_file else None
        self.output_file = Path(output_file) if output_file else None

    async def _append(self, path: Optional[Path], kind: str, name: str, value: str) -> None:
        if path is None:
            logger.debug("No %s file configured, skipping %s", kind, name)
            return
        async with aiofiles.open(str(path), "a", encoding="utf-8") as f:
            await f.write(format_file_command(name, value))

    async def save_state(self, name: str, value: str) -> None:
        await self._append(self.state_file, "state", name, value)

    async def set_output(self, name: str, value: str) -> None:
        await self._append(self.output_file, "output", name, value)
