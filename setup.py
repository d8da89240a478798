"""Setup file for start-proxy."""
from setuptools import setup, find_packages

import re
from pathlib import Path

def get_version() -> str:
    """Get version from version.py."""
    version_file = Path(__file__).parent / "start_proxy" / "version.py"
    if not version_file.exists():
        return "0.1.0"
    
    content = version_file.read_text()
    version_match = re.search(r"__version__\s*=\s*['\"]([^'\"]+)['\"]", content)
    if version_match:
        return version_match.group(1)
    return "0.1.0"

version = get_version()

setup(
    name="start-proxy",
    version=version,  # Version is read from start_proxy/version.py
    python_requires=">=3.10",
    packages=find_packages(include=[
        "start_proxy",
        "start_proxy.*",
    ]),
    install_requires=[
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0,<3.0.0",
        "aiohttp>=3.8.0",
        "aiofiles>=23.1.0",
        "cryptography>=42.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-timeout>=2.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "start-proxy=start_proxy.main:main",
        ],
    },
)
