"""Proxy process supervision."""
from .process import ProxyProcess
from .supervisor import (
    AttemptOutcome,
    AttemptStatus,
    ProxySupervisor,
    random_ephemeral_port,
    start_proxy,
)

__all__ = [
    'ProxyProcess',
    'AttemptOutcome',
    'AttemptStatus',
    'ProxySupervisor',
    'random_ephemeral_port',
    'start_proxy',
]
