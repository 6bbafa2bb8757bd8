from __future__ import annotations

import logging
from typing import Any

import httpx

from ooh_portal.auth import Capability
from ooh_portal.client.cache import QueryCache
from ooh_portal.client.session import SessionContext
from ooh_portal.config import settings

logger = logging.getLogger(__name__)

SECTIONS: dict[str, Capability] = {
    'dashboard': Capability.VIEW_DASHBOARD,
    'campaigns': Capability.VIEW_CAMPAIGNS,
    'bookings': Capability.VIEW_BOOKINGS,
    'inventory': Capability.VIEW_INVENTORY,
    'documents': Capability.VIEW_DOCUMENTS,
    'invoices': Capability.VIEW_INVOICES,
    'admin': Capability.ADMINISTER,
}


class ApiError(RuntimeError):
    def __init__(self, status_code: int, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class UnauthorizedError(ApiError):
    pass


class ApiClient:
    def __init__(
        self,
        http: httpx.Client,
        session: SessionContext | None = None,
        cache: QueryCache | None = None,
    ) -> None:
        self.http = http
        self.session = session or SessionContext()
        self.cache = cache or QueryCache()

    def _headers(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.session.token:
            headers[settings.session_header_name] = self.session.token
        return headers

    def request(self, method: str, url: str, *, json: Any = None, params: dict | None = None) -> Any:
        response = self.http.request(method, url, json=json, params=params, headers=self._headers())

        if response.status_code == 401:
            self.session.clear()
            raise UnauthorizedError(401, _message(response, 'Unauthorized'))
        if response.is_error:
            body = _json_or_empty(response)
            raise ApiError(response.status_code, body.get('message') or 'Request failed', body.get('errors'))
        if response.status_code == 204:
            return None
        return response.json()

    def get(self, url: str, params: dict | None = None) -> Any:
        return self.request('GET', url, params=params)

    def post(self, url: str, data: Any) -> Any:
        return self.request('POST', url, json=data)

    def patch(self, url: str, data: Any) -> Any:
        return self.request('PATCH', url, json=data)

    def delete(self, url: str) -> Any:
        return self.request('DELETE', url)

    # Session lifecycle

    def login(self, username: str, password: str) -> dict:
        user = self.post('/api/auth/login', {'username': username, 'password': password})
        token = user.pop('token')
        self.session.begin(token, user)
        logger.debug('Logged in as %s', user['username'])
        return user

    def logout(self) -> None:
        try:
            if self.session.token:
                self.post('/api/auth/logout', {})
        except UnauthorizedError:
            logger.debug('Session was already invalid at logout')
        finally:
            self.session.clear()
            self.cache.clear()

    def visible_sections(self) -> list[str]:
        return [name for name, capability in SECTIONS.items() if self.session.has_capability(capability)]

    # Cached reads

    def _user_key(self) -> str | None:
        user = self.session.user
        return user['id'] if user else None

    def list_inventory(self, **filters: str) -> list[dict]:
        params = {key: value for key, value in filters.items() if value}
        key = ('inventory', self._user_key(), tuple(sorted(params.items())))
        return self.cache.get_or_fetch(key, lambda: self.get('/api/inventory', params=params or None))

    def list_suppliers(self) -> list[dict]:
        return self.cache.get_or_fetch(('suppliers',), lambda: self.get('/api/suppliers'))

    def dashboard_stats(self) -> dict:
        # Always recomputed server side; never cached.
        return self.get('/api/dashboard/stats')

    # Writes

    def create_inventory_item(self, data: dict) -> dict:
        created = self.post('/api/inventory', data)
        self.cache.invalidate('inventory')
        return created

    def update_inventory_item(self, item_id: str, data: dict) -> dict:
        updated = self.patch(f'/api/inventory/{item_id}', data)
        self.cache.invalidate('inventory')
        return updated

    def delete_inventory_item(self, item_id: str) -> None:
        self.delete(f'/api/inventory/{item_id}')
        self.cache.invalidate('inventory')

    def update_supplier(self, supplier_id: str, data: dict) -> dict:
        updated = self.patch(f'/api/suppliers/{supplier_id}', data)
        self.cache.invalidate('suppliers')
        return updated


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _message(response: httpx.Response, default: str) -> str:
    return _json_or_empty(response).get('message') or default
