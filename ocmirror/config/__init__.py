"""
Flag defaults loaded from YAML and the environment.
"""

from .config import load_defaults
from .constants import DEFAULTS, ENV_PREFIX

__all__ = ["DEFAULTS", "ENV_PREFIX", "load_defaults"]
