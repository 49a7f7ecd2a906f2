"""
Defaults for command line flags.

Flag defaults come from three layers, lowest precedence first: built-in
values, an optional YAML file, and ``OC_MIRROR_<KEY>`` environment
variables. Flags given on the command line override all of them.

Example YAML::

    dir: /srv/mirror-workspace
    verbose: 2
    max_per_registry: 4
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..app.errors import ConfigurationError
from .constants import DEFAULTS, ENV_PREFIX, MAX_CONFIG_SIZE_BYTES


def _check_file_size(path: Path) -> None:
    """Check file size limit before parsing."""
    file_size = os.path.getsize(path)
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigurationError(
            f"'{path}' is {file_size} bytes, "
            f"exceeding maximum size of {MAX_CONFIG_SIZE_BYTES} bytes"
        )


def _coerce(key: str, value: Any) -> Any:
    """Convert ``value`` to the type of the built-in default for ``key``."""
    default = DEFAULTS[key]
    if isinstance(default, int) and not isinstance(value, bool):
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e
    return str(value)


def _load_yaml(path: Path) -> dict[str, Any]:
    _check_file_size(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in '{path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must contain a mapping")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides = {}
    for key in DEFAULTS:
        env_key = ENV_PREFIX + key.upper()
        if env_key in environ:
            overrides[key] = environ[env_key]
    return overrides


def load_defaults(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """
    Resolve flag defaults.

    Args:
        path: Optional YAML file; a missing file is an error
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Dict with every key of DEFAULTS

    Raises:
        ConfigurationError: On unreadable YAML, unknown keys or bad values
    """
    resolved = dict(DEFAULTS)
    layers: list[dict[str, Any]] = []
    if path is not None:
        layers.append(_load_yaml(Path(path)))
    layers.append(_env_overrides(os.environ if environ is None else environ))

    for layer in layers:
        for key, value in layer.items():
            if key not in DEFAULTS:
                raise ConfigurationError(f"unknown key '{key}'")
            resolved[key] = _coerce(key, value)
    return resolved
