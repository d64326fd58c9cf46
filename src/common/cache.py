# src/common/cache.py

from fastapi import Response

from src.common.config import settings

def production_cache(max_age: int):
    """
    Build a dependency that marks successful GET responses as cacheable.
    Only applied in production so local edits show up immediately.
    """
    async def set_cache_control(response: Response) -> None:
        if settings.is_production:
            response.headers["Cache-Control"] = f"max-age={max_age}"
    return set_cache_control
