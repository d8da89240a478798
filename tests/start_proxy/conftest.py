"""Common test fixtures and utilities."""
import base64
import json
import logging
import pytest
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

from start_proxy.state import ActionState


class TimingTestHelper:
    """Helper for testing time-based operations."""
    def __init__(self):
        """Initialize timing helper."""
        self._current_time = 0.0
        self._sleep_calls: List[float] = []

    def get_time(self) -> float:
        """Get current mock time."""
        return self._current_time

    def advance_time(self, seconds: float) -> None:
        """Advance mock time by given seconds."""
        self._current_time += seconds
        self._sleep_calls.append(seconds)

    @property
    def sleep_calls(self) -> List[float]:
        return list(self._sleep_calls)


@pytest.fixture
def time_helper() -> TimingTestHelper:
    """Create timing test helper."""
    return TimingTestHelper()


@pytest.fixture
def mock_sleep(time_helper: TimingTestHelper) -> AsyncMock:
    """Create a sleep replacement that only advances mock time."""
    async def sleep(seconds: float) -> None:
        time_helper.advance_time(seconds)

    return AsyncMock(side_effect=sleep)


class MemoryState(ActionState):
    """In-memory state sink recording every write in order."""

    def __init__(self):
        self.states: Dict[str, str] = {}
        self.outputs: Dict[str, str] = {}
        self.events: List[Tuple[str, str, str]] = []

    async def save_state(self, name: str, value: str) -> None:
        self.states[name] = value
        self.events.append(("state", name, value))

    async def set_output(self, name: str, value: str) -> None:
        self.outputs[name] = value
        self.events.append(("output", name, value))


@pytest.fixture
def memory_state() -> MemoryState:
    return MemoryState()


class FakeProxyProcess:
    """Stand-in for ProxyProcess driven by a scripted behaviour.

    Behaviours: ``"bound"`` (keeps running), ``"clean_exit"`` (exit 0),
    ``"bind_fail"`` (exit 1), ``"spawn_error"`` (OSError on spawn).
    """

    def __init__(self, factory: "FakeProcessFactory", behaviour: str, pid: int,
                 binary_path: Path, log_file_path: Path):
        self.factory = factory
        self.behaviour = behaviour
        self._pid = pid
        self.binary_path = binary_path
        self.log_file_path = log_file_path
        self.returncode: Optional[int] = None
        self.payload: Optional[bytes] = None

    async def spawn(self, host: str, port: int) -> int:
        self.factory.spawns.append((host, port))
        if self.behaviour == "spawn_error":
            raise FileNotFoundError(2, "No such file or directory", str(self.binary_path))
        return self._pid

    async def send_config(self, payload: bytes) -> None:
        self.payload = payload
        if self.behaviour == "bind_fail":
            self.returncode = 1
        elif self.behaviour == "clean_exit":
            self.returncode = 0


class FakeProcessFactory:
    """Creates FakeProxyProcess instances following a behaviour script."""

    def __init__(self, behaviours: List[str], first_pid: int = 4000):
        self.behaviours = list(behaviours)
        self.next_pid = first_pid
        self.spawns: List[Tuple[str, int]] = []
        self.processes: List[FakeProxyProcess] = []

    def __call__(self, binary_path: Path, log_file_path: Path) -> FakeProxyProcess:
        behaviour = self.behaviours.pop(0) if self.behaviours else "bound"
        process = FakeProxyProcess(self, behaviour, self.next_pid, binary_path, log_file_path)
        self.next_pid += 1
        self.processes.append(process)
        return process


@pytest.fixture
def process_factory():
    """Build a fake process factory from a behaviour list."""
    def create(behaviours: List[str], first_pid: int = 4000) -> FakeProcessFactory:
        return FakeProcessFactory(behaviours, first_pid)
    return create


_RUNNER_ENV = [
    "INPUT_REGISTRIES_CREDENTIALS",
    "INPUT_REGISTRY_SECRETS",
    "INPUT_PROXY_PASSWORD",
    "RUNNER_TEMP",
    "RUNNER_TOOL_CACHE",
    "RUNNER_DEBUG",
    "GITHUB_OUTPUT",
    "GITHUB_STATE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove runner variables the host environment may define."""
    for name in _RUNNER_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def npm_credentials() -> List[dict]:
    return [{"type": "npm", "host": "registry.npmjs.org", "token": "abc"}]


@pytest.fixture
def encoded_npm_credentials(npm_credentials) -> str:
    return base64.b64encode(json.dumps(npm_credentials).encode()).decode()


@pytest.fixture
def restore_package_logger():
    """Undo handlers and levels installed by setup_logging."""
    logger = logging.getLogger("start_proxy")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
