"""Run legacy agent plugins on the current agent runtime.

``CompatRuntime`` wraps a current engine and answers to the legacy runtime
interface. ``wrap_plugin`` turns a legacy plugin bundle into one the
current engine can load.
"""

from plugin_compat.config import settings
from plugin_compat.runtime import CompatRuntime
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.wrappers import is_legacy_plugin, unwrap_plugin, wrap_plugin

__all__ = [
    "CompatRuntime",
    "RuntimeCache",
    "is_legacy_plugin",
    "settings",
    "unwrap_plugin",
    "wrap_plugin",
]
