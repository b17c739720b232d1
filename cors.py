from fastapi import Request, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Paths whose preflight is answered without reaching the router
PREFLIGHT_PATHS = frozenset({"/pastes", "/paste"})


async def cors_middleware(request: Request, call_next):
    """Stamp cross-origin headers on every response and answer preflights directly."""
    if request.method == "OPTIONS" and request.url.path in PREFLIGHT_PATHS:
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response
