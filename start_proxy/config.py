"""Proxy process configuration."""
import json
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .models import CertificateAuthority, Credential, ProxyAuthCredentials

logger = logging.getLogger(__name__)


class ProxyConfig(BaseModel):
    """Configuration handed to the proxy binary on its standard input."""
    model_config = ConfigDict(frozen=True)

    all_credentials: List[Credential]
    ca: CertificateAuthority
    proxy_auth: Optional[ProxyAuthCredentials] = None

    def to_dict(self) -> dict:
        """Build the document the proxy reads, omitting ``proxy_auth`` when unset."""
        payload = {
            "all_credentials": [credential.to_dict() for credential in self.all_credentials],
            "ca": self.ca.model_dump(),
        }
        if self.proxy_auth is not None:
            payload["proxy_auth"] = self.proxy_auth.model_dump()
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @property
    def hosts(self) -> List[str]:
        """Registry hosts covered by the credentials, in input order."""
        return [str(credential.host) for credential in self.all_credentials]


def assemble_proxy_config(
    credentials: List[Credential],
    ca: CertificateAuthority,
    proxy_auth: Optional[ProxyAuthCredentials] = None,
) -> ProxyConfig:
    """Combine resolved inputs into a single proxy configuration.

    No validation beyond shape happens here; the proxy validates its own input.
    """
    config = ProxyConfig(all_credentials=list(credentials), ca=ca, proxy_auth=proxy_auth)
    logger.debug(
        "Assembled proxy configuration with %d credential(s), proxy auth %s",
        len(config.all_credentials),
        "enabled" if proxy_auth is not None else "disabled",
    )
    return config
