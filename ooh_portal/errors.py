from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {'body', 'query', 'path', 'header'}


class NotFoundError(LookupError):
    def __init__(self, entity: str) -> None:
        super().__init__(f'{entity} not found')
        self.entity = entity


class FieldValidationError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def _field_name(loc: tuple | list) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return '.'.join(parts)


def validation_payload(errors: list[dict]) -> dict:
    return {
        'message': 'Validation error',
        'errors': [
            {'field': _field_name(err.get('loc', ())), 'message': err.get('msg', ''), 'type': err.get('type', '')}
            for err in errors
        ],
    }


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(validation_payload(exc.errors()), status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(FieldValidationError)
    async def field_validation_handler(request: Request, exc: FieldValidationError):
        payload = validation_payload([{'loc': ('body', exc.field), 'msg': exc.message, 'type': 'value_error'}])
        return JSONResponse(payload, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse({'message': str(exc)}, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({'message': exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        return JSONResponse({'message': 'Internal server error'}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
