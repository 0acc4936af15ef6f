"""Legacy manager and adapter objects that forward to the façade."""

from plugin_compat.proxies.database import CacheManagerProxy, DatabaseAdapterProxy
from plugin_compat.proxies.knowledge import KnowledgeManagerProxy
from plugin_compat.proxies.memory_manager import MemoryManagerProxy, add_embedding_to_memory

__all__ = [
    "CacheManagerProxy",
    "DatabaseAdapterProxy",
    "KnowledgeManagerProxy",
    "MemoryManagerProxy",
    "add_embedding_to_memory",
]
