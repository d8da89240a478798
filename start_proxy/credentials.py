"""Registry and proxy credential resolution."""
import base64
import binascii
import json
import logging
from typing import Any, List, Optional

from .errors import CredentialsError
from .models import PROXY_USER, Credential, ProxyAuthCredentials

logger = logging.getLogger(__name__)


def _parse_credential_list(raw: str, source: str) -> List[Credential]:
    """Parse a JSON credential list, keeping order and element shape."""
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CredentialsError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, list):
        raise CredentialsError(f"Expected a JSON array in {source}, got {type(data).__name__}")

    credentials = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise CredentialsError(
                f"Expected a JSON object at index {index} of {source}, got {type(item).__name__}"
            )
        credentials.append(Credential.model_validate(item))
    return credentials


def resolve_registry_credentials(
    encoded_credentials: Optional[str] = None,
    registry_secrets: Optional[str] = None,
) -> List[Credential]:
    """Return registry credentials from the action inputs.

    ``registries_credentials`` (base64 encoded JSON) takes precedence over
    ``registry_secrets`` (plain JSON). When neither is set the list is empty.

    Args:
        encoded_credentials: Base64 encoded JSON credential list
        registry_secrets: Plaintext JSON credential list

    Returns:
        Credentials in input order

    Raises:
        CredentialsError: If the selected input cannot be decoded or parsed
    """
    if encoded_credentials is not None:
        try:
            decoded = base64.b64decode(encoded_credentials).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CredentialsError(f"Invalid base64 in registries_credentials: {e}") from e
        return _parse_credential_list(decoded, "registries_credentials")

    logger.info("Using structured credentials.")
    return _parse_credential_list(registry_secrets or "[]", "registry_secrets")


def resolve_proxy_auth(proxy_password: Optional[str] = None) -> Optional[ProxyAuthCredentials]:
    """Return basic auth for the proxy itself, or None when no password is set."""
    if proxy_password:
        return ProxyAuthCredentials(username=PROXY_USER, password=proxy_password)
    return None
