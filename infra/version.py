from __future__ import annotations

import os
from importlib import metadata
from pathlib import Path


DISTRIBUTION_NAME = "gig-ledger"
_DEFAULT_APP_VERSION = "1.4.0"
_VERSION_FILE = Path(__file__).with_name("app_version.txt")


def _read_version_from_file(path: Path) -> str | None:
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return raw or None


def _installed_version() -> str | None:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return None


def get_app_version() -> str:
    """Version stamped on support events: env override, bundled file, installed package, default."""
    env_override = (os.getenv("GIG_APP_VERSION") or "").strip()
    if env_override:
        return env_override

    file_version = _read_version_from_file(_VERSION_FILE)
    if file_version:
        return file_version

    return _installed_version() or _DEFAULT_APP_VERSION


__all__ = ["get_app_version", "DISTRIBUTION_NAME"]
