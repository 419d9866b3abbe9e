"""``Cache-Control`` header values for the HTTP endpoints."""

from typing import Literal


CacheStrategy = Literal["static", "semi_static", "dynamic", "no_cache"]

# Max age in seconds per strategy.
CACHE_CONFIG: dict[str, int] = {
    "static": 24 * 60 * 60,
    "semi_static": 5 * 60,
    "dynamic": 30,
    "no_cache": 0,
}


def generate_cache_control(strategy: CacheStrategy, is_public: bool = True) -> str:
    """Build the header value for ``strategy``.

    Example:
        >>> generate_cache_control("dynamic")
        'public, max-age=30, s-maxage=60, stale-while-revalidate=300'
    """
    max_age = CACHE_CONFIG[strategy]
    if max_age == 0:
        return "no-store, max-age=0"

    directives = ["public" if is_public else "private", f"max-age={max_age}"]
    # shared caches may keep public responses twice as long
    if is_public:
        directives.append(f"s-maxage={max_age * 2}")
    directives.append(f"stale-while-revalidate={max_age * 10}")
    return ", ".join(directives)


def cache_headers(strategy: CacheStrategy, is_public: bool = True) -> dict[str, str]:
    return {"Cache-Control": generate_cache_control(strategy, is_public)}
