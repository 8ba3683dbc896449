from listings.infrastructure.cache.redis_cache import CacheService, PrincipalCache

__all__ = ["CacheService", "PrincipalCache"]
