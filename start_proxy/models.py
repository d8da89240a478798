"""Data models for proxy startup."""

__all__ = [
    "Credential",
    "CertificateAuthority",
    "ProxyAuthCredentials",
    "ProxyEndpoint",
    "PROXY_USER",
]

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

PROXY_USER = "proxy_user"


class Credential(BaseModel):
    """Auth material for one registry.

    Every field is optional, untyped values pass through and unknown keys are
    kept, so a credential list read from the inputs is handed to the proxy
    exactly as it was supplied.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    type: Optional[Any] = None
    host: Optional[Any] = None
    username: Optional[Any] = None
    password: Optional[Any] = None
    token: Optional[Any] = None

    def to_dict(self) -> dict:
        """Dump only the keys present in the original input."""
        return self.model_dump(exclude_unset=True)


class CertificateAuthority(BaseModel):
    """PEM encoded CA certificate and private key."""
    model_config = ConfigDict(frozen=True)

    cert: str
    key: str


class ProxyAuthCredentials(BaseModel):
    """Basic auth between the job and the local proxy."""
    model_config = ConfigDict(frozen=True)

    username: str = PROXY_USER
    password: str


class ProxyEndpoint(BaseModel):
    """Where the running proxy listens, plus the CA it presents."""
    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    ca_certificate: str

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
