"""
Configuration-related constants and resource limits.
"""

# Maximum config file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

ENV_PREFIX = "OC_MIRROR_"

DEFAULTS: dict[str, int | str] = {
    "dir": "oc-mirror-workspace",
    "verbose": 0,
    "max_per_registry": 6,
}
