"""
Limitation de débit optionnelle (fastapi-limiter + Redis, fallback mémoire en DEV).
Clé: token Bearer hashé sinon IP, toujours suffixée par le path.
"""
from typing import Dict, Any
from fastapi import Request, Response
from urllib.parse import urlparse
import hashlib
import os
import time

def _client_key(req: Request) -> str:
    # Priorité: Bearer (hashé) puis IP
    auth = req.headers.get("Authorization", "")
    path = req.url.path
    if auth.startswith("Bearer "):
        h = hashlib.sha256(auth[7:].encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            # un seau par fenêtre: {seconds: {clé: [horodatages]}}
            stores = getattr(request.app.state, "_rl_store", {})
            store = stores.setdefault(seconds, {})
            for stale in [k for k, v in store.items() if not v or now - v[-1] >= seconds]:
                del store[stale]
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                from fastapi import HTTPException
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = stores
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _client_key(req)
        return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    from fastapi_limiter import FastAPILimiter
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }
    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if limiter_ready and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}
    return info
