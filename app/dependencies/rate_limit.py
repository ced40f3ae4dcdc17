from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter


def rate_limit(times: int, seconds: int):
    """
    Per-route rate limit backed by fastapi-limiter.

    The limiter needs redis; when FastAPILimiter was never initialised
    (no REDIS_URL) the dependency lets requests through.
    """
    limiter = RateLimiter(times=times, seconds=seconds)

    async def dependency(request: Request, response: Response):
        if FastAPILimiter.redis is None:
            return
        await limiter(request, response)

    return dependency


login_rate_limit = rate_limit(times=5, seconds=60)
refresh_rate_limit = rate_limit(times=10, seconds=60)
