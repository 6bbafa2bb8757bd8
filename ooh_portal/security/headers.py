from fastapi import FastAPI, Request
from starlette.responses import Response

from ooh_portal.config import settings

API_PREFIX = '/api/'
NO_INDEX = 'noindex, nofollow, noarchive'


def api_cache_headers() -> dict[str, str]:
    # API payloads differ per session token.
    return {
        'Cache-Control': 'no-store',
        'Pragma': 'no-cache',
        'Vary': settings.session_header_name,
    }


def install_security_headers(app: FastAPI) -> None:
    @app.middleware('http')
    async def security_headers_middleware(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers['X-Robots-Tag'] = NO_INDEX
        response.headers['X-Content-Type-Options'] = 'nosniff'
        if request.url.path.startswith(API_PREFIX):
            response.headers.update(api_cache_headers())
        return response
