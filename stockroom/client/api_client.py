"""
Stockroom API client

Wraps the HTTP API with requests and turns error responses back into the
service's exception classes, so callers handle InsufficientStock or
InvalidTransition the same way on either side of the wire.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from stockroom.client.app_state import AppState
from stockroom.services.errors import ServiceError, error_from_payload

logger = logging.getLogger(__name__)


class StockroomClient:
    """Client for the stockroom HTTP API"""

    def __init__(self, base_url: str = 'http://localhost:5000', state: Optional[AppState] = None,
                 timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.state = state or AppState()
        self.timeout = timeout
        self.http = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.state.access_token:
            headers['Authorization'] = f"Bearer {self.state.access_token}"
        return headers

    def _request(self, method: str, path: str, json: Any = None, params: Optional[Dict] = None) -> Any:
        url = f"{self.base_url}/api/v1{path}"
        try:
            response = self.http.request(
                method, url, json=json, params=params,
                headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error(f"Timeout calling {method} {url}")
            raise ServiceError(f"Request to {path} timed out")
        except requests.exceptions.ConnectionError:
            logger.error(f"Connection error calling {method} {url}")
            raise ServiceError(f"Could not reach the stockroom service at {self.base_url}")

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = {'message': response.text or response.reason}
            error = error_from_payload(payload, status_code=response.status_code)
            logger.warning(f"{method} {path} failed with {response.status_code}: {error.message}")
            raise error

        if not response.content:
            return None
        return response.json()

    # Session

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        session = self._request('POST', '/auth/sign-in', json={'email': email, 'password': password})
        self.state.set_session(session)
        return session

    def sign_out(self):
        self.state.clear()

    def load_profile(self) -> Dict[str, Any]:
        profile = self._request('GET', '/auth/profile')
        self.state.set_profile(profile)
        return profile

    def update_profile(self, **fields) -> Dict[str, Any]:
        profile = self._request('PUT', '/auth/profile', json=fields)
        self.state.set_profile(profile)
        return profile

    # Items

    def list_items(self, **params) -> Dict[str, Any]:
        return self._request('GET', '/items', params=params)

    def get_item(self, item_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/items/{item_id}')

    def create_item(self, **fields) -> Dict[str, Any]:
        return self._request('POST', '/items', json=fields)

    def lookup_barcode(self, code: str) -> Dict[str, Any]:
        return self._request('GET', f'/items/lookup/{code}')

    def adjust_quantity(self, item_id: str, adjustment: int, reason: Optional[str] = None) -> Dict[str, Any]:
        return self._request('POST', f'/items/{item_id}/adjust',
                             json={'adjustment': adjustment, 'reason': reason})

    # Pick lists

    def list_pick_lists(self, status: str = 'all', search: Optional[str] = None) -> Dict[str, Any]:
        params = {'status': status}
        if search:
            params['search'] = search
        return self._request('GET', '/pick-lists', params=params)

    def get_pick_list(self, pick_list_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/pick-lists/{pick_list_id}')

    def create_pick_list(self, name: str, notes: Optional[str] = None) -> Dict[str, Any]:
        return self._request('POST', '/pick-lists', json={'name': name, 'notes': notes})

    def add_lines(self, pick_list_id: str, lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._request('POST', f'/pick-lists/{pick_list_id}/lines', json={'lines': lines})['lines']

    def transition(self, pick_list_id: str, status: str) -> Dict[str, Any]:
        return self._request('POST', f'/pick-lists/{pick_list_id}/transition', json={'status': status})

    def pick_line(self, line_id: str, quantity_picked: int) -> Dict[str, Any]:
        return self._request('POST', f'/pick-lists/lines/{line_id}/pick',
                             json={'quantity_picked': quantity_picked})

    def add_comment(self, pick_list_id: str, content: str) -> Dict[str, Any]:
        return self._request('POST', f'/pick-lists/{pick_list_id}/comments', json={'content': content})

    def dashboard(self) -> Dict[str, Any]:
        return self._request('GET', '/dashboard')
