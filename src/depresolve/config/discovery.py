"""Config file discovery and loading.

Walk-up finder locates depresolve.toml, similar to how git finds .git/.
Supports DEPRESOLVE_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from depresolve.config.models import ResolverConfig

CONFIG_FILENAME = "depresolve.toml"
CONFIG_ENV_VAR = "DEPRESOLVE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for depresolve.toml.

    Returns the path to the config file, or None if not found.
    Checks DEPRESOLVE_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_resolver_config(path: Path | None = None, cwd: Path | None = None) -> ResolverConfig:
    """Build a :class:`ResolverConfig` for library use from a TOML file.

    Reads the [resolver] section; pass the result as ``config=`` to
    ``DependencyNode.load`` or ``DependencyLoader``. If *path* is None,
    uses find_config(*cwd*) to discover the file. Returns default
    ResolverConfig if no file is found. The CLI reads the same section
    through ``DepSettings`` instead.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return ResolverConfig()

    raw = path.read_text(encoding="utf-8")
    data: dict[str, Any] = tomllib.loads(raw)
    return ResolverConfig.model_validate(data.get("resolver", {}))
