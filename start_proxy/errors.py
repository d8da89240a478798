"""Error handling for proxy startup."""
from enum import Enum


class ErrorCode(Enum):
    """Error codes for startup failures."""
    UNKNOWN = 1
    CREDENTIALS_ERROR = 10
    CERTIFICATE_ERROR = 20
    DOWNLOAD_ERROR = 30
    SPAWN_ERROR = 40
    BIND_ERROR = 41
    STARTUP_ERROR = 50


class StartProxyError(Exception):
    """Base class for startup errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN):
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class CredentialsError(StartProxyError):
    """Malformed registry credential input."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CREDENTIALS_ERROR)


class CertificateError(StartProxyError):
    """Certificate authority could not be generated."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CERTIFICATE_ERROR)


class ToolDownloadError(StartProxyError):
    """Proxy binary could not be fetched or unpacked."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DOWNLOAD_ERROR)


class ProxySpawnError(StartProxyError):
    """Proxy process could not be created at all."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SPAWN_ERROR)


class ProxyBindError(StartProxyError):
    """Proxy process exited non-zero shortly after launch."""

    def __init__(self, message: str, port: int, exit_code: int):
        self.port = port
        self.exit_code = exit_code
        super().__init__(message, ErrorCode.BIND_ERROR)


class ProxyStartupError(StartProxyError):
    """All start attempts were used up."""
    def __init__(self, message: str):
        super().__init__(message, ErrorCode.STARTUP_ERROR)


def wrap_error(exc: BaseException) -> StartProxyError:
    """Convert arbitrary exceptions to startup errors, keeping the message."""
    if isinstance(exc, StartProxyError):
        return exc
    message = str(exc) or exc.__class__.__name__
    return StartProxyError(message)
