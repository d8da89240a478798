"""Start-proxy package.

This package bootstraps the local update-job proxy, including:
- Self-signed certificate authority generation for HTTPS interception
- Registry credential and proxy authentication resolution
- Proxy binary acquisition and caching
- Proxy process supervision with port rotation
"""

import logging

from .version import __version__

__all__ = ['__version__']

# Initialize package-level logger
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
