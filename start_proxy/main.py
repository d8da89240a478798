"""Entry point that starts the update-job proxy."""
import asyncio
import logging
import sys
from typing import Optional

from .certificates import generate_certificate_authority
from .config import assemble_proxy_config
from .credentials import resolve_proxy_auth, resolve_registry_credentials
from .errors import wrap_error
from .logging_utils import setup_logging
from .models import ProxyEndpoint
from .settings import Settings
from .state import (
    CA_CERTIFICATE_OUTPUT,
    HOST_OUTPUT,
    LOG_FILE_STATE,
    PORT_OUTPUT,
    ActionState,
    FileCommandState,
)
from .supervisor import start_proxy
from .toolcache import ToolCache, get_proxy_binary_path

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "start-proxy action failed: "


async def run_wrapper(
    settings: Settings,
    state: Optional[ActionState] = None,
    cache: Optional[ToolCache] = None,
    **supervisor_options,
) -> ProxyEndpoint:
    """Resolve inputs, start the proxy and publish its endpoint."""
    if state is None:
        state = FileCommandState(settings.state_file, settings.output_file)
    if cache is None:
        cache = ToolCache(settings.resolved_tool_cache_dir)

    # Setup logging for the proxy
    log_file_path = settings.log_file_path
    await state.save_state(LOG_FILE_STATE, str(log_file_path))

    credentials = resolve_registry_credentials(
        settings.registries_credentials,
        settings.registry_secrets,
    )

    ca = generate_certificate_authority()
    proxy_auth = resolve_proxy_auth(settings.proxy_password)
    config = assemble_proxy_config(credentials, ca, proxy_auth)
    logger.debug(
        "Credentials loaded for the following URLs:\n %s",
        "\n".join(config.hosts),
    )

    binary_path = await get_proxy_binary_path(cache)
    endpoint = await start_proxy(binary_path, config, log_file_path, state, **supervisor_options)

    await state.set_output(HOST_OUTPUT, endpoint.host)
    await state.set_output(PORT_OUTPUT, str(endpoint.port))
    await state.set_output(CA_CERTIFICATE_OUTPUT, endpoint.ca_certificate)
    return endpoint


def main() -> int:
    """Run the launcher and return the process exit code."""
    try:
        settings = Settings()
    except Exception as e:
        setup_logging()
        logger.error(f"{FAILURE_PREFIX}{wrap_error(e).message}")
        return 1

    setup_logging(debug=settings.debug)
    logger.debug(f"Initialized Settings: {settings.masked_dump()}")
    try:
        asyncio.run(run_wrapper(settings))
    except Exception as e:
        error = wrap_error(e)
        logger.error(f"{FAILURE_PREFIX}{error.message}")
        logger.debug(f"Startup failed with {error.code.name}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
