"""
Cache service for screening listings
"""
import logging
from typing import Any, Dict, List, Optional

from cinema.core.config import settings
from cinema.core.redis import redis_client

logger = logging.getLogger(__name__)


class CacheService:
    """Service for managing cache keys and invalidation"""

    # Cache key patterns
    REPERTOIRE_KEY = "repertoire:{repertoire_id}"
    MOVIE_REPERTOIRES_KEY = "movie:{movie_id}:repertoires:{start_date}:{end_date}"
    MOVIE_REPERTOIRES_PATTERN = "movie:{movie_id}:repertoires:*"

    @staticmethod
    def get_repertoire(repertoire_id: int) -> Optional[Dict[str, Any]]:
        """Get cached screening"""
        key = CacheService.REPERTOIRE_KEY.format(repertoire_id=repertoire_id)
        cached = redis_client.get(key)
        if cached:
            logger.debug(f"Cache HIT: {key}")
        return cached

    @staticmethod
    def set_repertoire(repertoire_id: int, data: Dict[str, Any]) -> bool:
        key = CacheService.REPERTOIRE_KEY.format(repertoire_id=repertoire_id)
        return redis_client.set(key, data, ttl=settings.REDIS_CACHE_TTL)

    @staticmethod
    def get_movie_repertoires(movie_id: int, start_date, end_date) -> Optional[List[Dict[str, Any]]]:
        """Get cached screening listing for a movie and date range"""
        key = CacheService.MOVIE_REPERTOIRES_KEY.format(
            movie_id=movie_id, start_date=start_date, end_date=end_date
        )
        cached = redis_client.get(key)
        if cached is not None:
            logger.debug(f"Cache HIT: {key}")
        return cached

    @staticmethod
    def set_movie_repertoires(movie_id: int, start_date, end_date, data: List[Dict[str, Any]]) -> bool:
        key = CacheService.MOVIE_REPERTOIRES_KEY.format(
            movie_id=movie_id, start_date=start_date, end_date=end_date
        )
        return redis_client.set(key, data, ttl=settings.REDIS_CACHE_TTL)

    @staticmethod
    def invalidate_repertoire(movie_id: int, repertoire_id: Optional[int] = None) -> int:
        """
        Invalidate a screening and every cached listing of its movie.

        Called after each committed reservation, cancellation and screening edit.
        """
        deleted = redis_client.delete_pattern(
            CacheService.MOVIE_REPERTOIRES_PATTERN.format(movie_id=movie_id)
        )
        if repertoire_id is not None:
            redis_client.delete(CacheService.REPERTOIRE_KEY.format(repertoire_id=repertoire_id))
        logger.debug(f"Invalidated cache for movie {movie_id}, repertoire {repertoire_id}")
        return deleted
