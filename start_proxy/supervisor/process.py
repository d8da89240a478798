"""Proxy process execution utilities."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class ProxyProcess:
    """One launch of the proxy binary.

    The child runs in its own session so it outlives the launcher. Its
    transport is never closed here: closing would kill the child.
    """

    def __init__(self, binary_path: Path, log_file_path: Path):
        """Initialize process manager."""
        self.binary_path = Path(binary_path)
        self.log_file_path = Path(log_file_path)
        self._process: Optional[asyncio.subprocess.Process] = None

    def build_command(self, host: str, port: int) -> List[str]:
        return [
            str(self.binary_path),
            "-addr", f"{host}:{port}",
            "-config", "-",
            "-logfile", str(self.log_file_path),
        ]

    async def spawn(self, host: str, port: int) -> int:
        """Start the proxy bound to ``host:port``.

        Returns:
            The child's process id

        Raises:
            OSError: If the process cannot be created (binary missing,
                not executable, resource limits)
        """
        cmd = self.build_command(host, port)
        logger.debug(f"Starting proxy: {' '.join(cmd)}")
        self._process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            start_new_session=True
        )
        return self._process.pid

    async def send_config(self, payload: bytes) -> None:
        """Write the configuration to the child's stdin and close it."""
        if not self._process:
            raise RuntimeError("Proxy process not started")

        stdin = self._process.stdin
        if stdin is None:
            return
        try:
            stdin.write(payload)
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            # The child is already gone; its exit code tells the rest.
            logger.debug(f"Proxy closed stdin early: {e}")
        finally:
            stdin.close()

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> Optional[int]:
        """Exit code, or None while the process is alive."""
        if not self._process:
            return None
        return self._process.returncode

    @property
    def is_running(self) -> bool:
        """Check if the process is running."""
        return self._process is not None and self._process.returncode is None
