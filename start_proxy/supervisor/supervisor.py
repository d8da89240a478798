"""Proxy process supervision.

Launches the proxy, feeds it the configuration, and retries on a random
ephemeral port whenever the process exits non-zero shortly after start.
There is no handshake with the proxy: a process that is still alive (or
exited cleanly) after the settle delay counts as bound. A slow bind can
therefore pass as success and a slow start as failure.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..config import ProxyConfig
from ..errors import ProxyBindError, ProxySpawnError, ProxyStartupError
from ..models import ProxyEndpoint
from ..state import PID_STATE, ActionState
from .process import ProxyProcess

logger = logging.getLogger(__name__)

PROXY_HOST = "127.0.0.1"
INITIAL_PORT = 49152
EPHEMERAL_PORT_MIN = 49152
EPHEMERAL_PORT_MAX = 65535  # exclusive
MAX_ATTEMPTS = 5
SETTLE_DELAY = 1.0


def random_ephemeral_port() -> int:
    """Pick a port uniformly from [49152, 65535)."""
    return random.randrange(EPHEMERAL_PORT_MIN, EPHEMERAL_PORT_MAX)


class AttemptStatus(Enum):
    """Result of a single launch attempt."""
    BOUND = auto()
    BIND_FAILED = auto()
    SPAWN_ERROR = auto()


@dataclass(frozen=True)
class AttemptOutcome:
    """What one spawn-and-settle cycle observed."""
    status: AttemptStatus
    port: int
    pid: Optional[int] = None
    exit_code: Optional[int] = None
    error: Optional[BaseException] = None
    next_port: Optional[int] = None


class ProxySupervisor:
    """Starts the proxy and hands it off once it appears bound."""

    def __init__(
        self,
        binary_path: Path,
        log_file_path: Path,
        state: ActionState,
        *,
        host: str = PROXY_HOST,
        initial_port: int = INITIAL_PORT,
        max_attempts: int = MAX_ATTEMPTS,
        settle_delay: float = SETTLE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        choose_port: Callable[[], int] = random_ephemeral_port,
        process_factory: Callable[[Path, Path], ProxyProcess] = ProxyProcess,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.binary_path = Path(binary_path)
        self.log_file_path = Path(log_file_path)
        self.state = state
        self.host = host
        self.initial_port = initial_port
        self.max_attempts = max_attempts
        self.settle_delay = settle_delay
        self._sleep = sleep
        self._choose_port = choose_port
        self._process_factory = process_factory

    async def attempt(self, port: int, payload: bytes) -> AttemptOutcome:
        """Spawn the proxy on *port*, send *payload*, and wait the settle delay."""
        process = self._process_factory(self.binary_path, self.log_file_path)
        try:
            pid = await process.spawn(self.host, port)
        except OSError as e:
            logger.error("Failed to spawn proxy %s: %s", self.binary_path, e)
            return AttemptOutcome(AttemptStatus.SPAWN_ERROR, port, error=e)

        await self.state.save_state(PID_STATE, str(pid))
        await process.send_config(payload)

        # Give the proxy time to either bind or exit
        await self._sleep(self.settle_delay)

        exit_code = process.returncode
        if exit_code is None or exit_code == 0:
            return AttemptOutcome(AttemptStatus.BOUND, port, pid=pid, exit_code=exit_code)

        next_port = self._choose_port()
        return AttemptOutcome(
            AttemptStatus.BIND_FAILED,
            port,
            pid=pid,
            exit_code=exit_code,
            next_port=next_port,
        )

    async def start(self, config: ProxyConfig) -> ProxyEndpoint:
        """Launch the proxy, rotating ports on bind failure.

        Returns:
            Host, bound port and CA certificate of the running proxy

        Raises:
            ProxySpawnError: If the binary could not be started at all
            ProxyStartupError: If every attempt exited non-zero
        """
        payload = config.to_json().encode("utf-8")
        port = self.initial_port
        last_error: Optional[ProxyBindError] = None

        for attempt in range(1, self.max_attempts + 1):
            logger.debug("Starting proxy on %s:%d (attempt %d/%d)",
                         self.host, port, attempt, self.max_attempts)
            outcome = await self.attempt(port, payload)

            if outcome.status is AttemptStatus.BOUND:
                logger.info(f"Proxy started on {self.host}:{port}")
                return ProxyEndpoint(host=self.host, port=port, ca_certificate=config.ca.cert)

            if outcome.status is AttemptStatus.SPAWN_ERROR:
                raise ProxySpawnError(str(outcome.error)) from outcome.error

            last_error = ProxyBindError(
                f"Proxy exited with code {outcome.exit_code} while binding to {self.host}:{port}",
                port=port,
                exit_code=outcome.exit_code,
            )
            if attempt < self.max_attempts:
                logger.warning("%s, retrying on port %d", last_error, outcome.next_port)
            port = outcome.next_port

        raise ProxyStartupError(
            f"Proxy failed to start after {self.max_attempts} attempts: {last_error}"
        ) from last_error


async def start_proxy(
    binary_path: Path,
    config: ProxyConfig,
    log_file_path: Path,
    state: ActionState,
    **options,
) -> ProxyEndpoint:
    """Start the proxy binary with *config*; see :class:`ProxySupervisor`."""
    supervisor = ProxySupervisor(binary_path, log_file_path, state, **options)
    return await supervisor.start(config)
