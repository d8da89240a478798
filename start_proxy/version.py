"""Version information for start-proxy."""

__version__ = "0.1.0"
__license__ = "MIT"

# Proxy binary shipped by the release bundle
PROXY_TOOL_NAME = "update-job-proxy"
PROXY_TOOL_VERSION = "v2.0.20240722180912"
PROXY_RELEASE_URL = (
    "https://github.com/github/codeql-action/releases/download/"
    "codeql-bundle-v2.18.1/update-job-proxy.tar.gz"
)
