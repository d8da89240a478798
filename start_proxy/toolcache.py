"""Proxy binary download and caching.

Mirrors the hosted runner tool cache layout::

    <root>/<tool>/<version>/<arch>/
    <root>/<tool>/<version>/<arch>.complete
"""
import logging
import os
import platform
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp

from .errors import ToolDownloadError
from .version import PROXY_RELEASE_URL, PROXY_TOOL_NAME, PROXY_TOOL_VERSION

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536
DOWNLOAD_TIMEOUT = 300

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
}


def runner_arch() -> str:
    """Architecture name as used by the tool cache."""
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


class ToolCache:
    """Versioned on-disk cache of downloaded tools."""

    def __init__(self, root: Path, arch: Optional[str] = None):
        self.root = Path(root)
        self.arch = arch or runner_arch()

    def tool_path(self, tool: str, version: str) -> Path:
        return self.root / tool / version / self.arch

    def _marker(self, tool: str, version: str) -> Path:
        return self.root / tool / version / f"{self.arch}.complete"

    def find(self, tool: str, version: str) -> Optional[Path]:
        """Return the cached directory for *tool* at *version*, if complete."""
        path = self.tool_path(tool, version)
        if path.is_dir() and self._marker(tool, version).exists():
            logger.debug("Found %s %s in tool cache at %s", tool, version, path)
            return path
        return None

    async def download(self, url: str) -> Path:
        """Download *url* into a temporary file.

        Raises:
            ToolDownloadError: On any HTTP or connection failure
        """
        fd, name = tempfile.mkstemp(prefix="start-proxy-", suffix=".tar.gz")
        os.close(fd)
        target = Path(name)

        logger.info(f"Downloading {url}")
        timeout = aiohttp.ClientTimeout(total=DOWNLOAD_TIMEOUT)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    async with aiofiles.open(str(target), "wb") as f:
                        async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                            await f.write(chunk)
        except aiohttp.ClientError as e:
            target.unlink(missing_ok=True)
            raise ToolDownloadError(f"Failed to download {url}: {e}") from e
        return target

    def extract_tar(self, archive: Path) -> Path:
        """Extract a gzipped tarball into a fresh temporary directory."""
        dest = Path(tempfile.mkdtemp(prefix="start-proxy-"))
        try:
            with tarfile.open(archive, "r:*") as tar:
                tar.extractall(dest, filter="data")
        except (tarfile.TarError, OSError) as e:
            shutil.rmtree(dest, ignore_errors=True)
            raise ToolDownloadError(f"Failed to extract {archive}: {e}") from e
        return dest

    def cache_dir(self, source: Path, tool: str, version: str) -> Path:
        """Copy *source* into the cache and mark the entry complete."""
        path = self.tool_path(tool, version)
        if path.exists():
            shutil.rmtree(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, path)
        self._marker(tool, version).touch()
        logger.debug("Cached %s %s at %s", tool, version, path)
        return path


async def get_proxy_binary_path(
    cache: ToolCache,
    url: str = PROXY_RELEASE_URL,
    tool: str = PROXY_TOOL_NAME,
    version: str = PROXY_TOOL_VERSION,
) -> Path:
    """Return the proxy executable, downloading it on a cache miss."""
    tool_dir = cache.find(tool, version)
    if tool_dir is None:
        archive = await cache.download(url)
        try:
            extracted = cache.extract_tar(archive)
        finally:
            archive.unlink(missing_ok=True)
        try:
            tool_dir = cache.cache_dir(extracted, tool, version)
        finally:
            shutil.rmtree(extracted, ignore_errors=True)
    return tool_dir / tool
