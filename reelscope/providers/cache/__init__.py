from reelscope.providers.cache.memory_cache import MemoryRecordCache

__all__ = ["MemoryRecordCache"]
