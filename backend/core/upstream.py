"""
HTTP client for the external auction backend.

Every gateway view talks to the backend through BackendClient so that
authentication, timeouts and error translation happen in one place.
"""
import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised for any failed backend call (network, non-2xx, bad JSON)."""

    def __init__(self, message: str, status_code: int = 502, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self):
        return self.message


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Drop empty filter values and stringify the rest for a query string.

    None and '' are removed; booleans become 'true'/'false'.
    """
    cleaned = {}
    if not params:
        return cleaned
    for key, value in params.items():
        if value is None or value == '':
            continue
        if isinstance(value, bool):
            cleaned[key] = 'true' if value else 'false'
        elif isinstance(value, (list, tuple)):
            cleaned[key] = ','.join(str(v) for v in value)
        else:
            cleaned[key] = str(value)
    return cleaned


def extract_error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get('error') or body.get('message')
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


class BackendClient:
    """
    Thin wrapper around requests.Session bound to one bearer token.

    Args:
        token: Bearer token forwarded to the backend (optional for public endpoints)
        base_url: Backend root URL, defaults to settings.BACKEND_API_URL
        timeout: Seconds before a request is abandoned
    """

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.token = token
        self.base_url = (base_url or getattr(settings, 'BACKEND_API_URL', 'http://localhost:3001')).rstrip('/')
        self.timeout = timeout or getattr(settings, 'BACKEND_API_TIMEOUT', 30)
        self.session = session or requests.Session()

    def build_url(self, endpoint: str) -> str:
        if not endpoint.startswith('/'):
            endpoint = '/' + endpoint
        return f"{self.base_url}{endpoint}"

    def build_headers(self, json_body: bool = True) -> Dict[str, str]:
        headers = {}
        if json_body:
            headers['Content-Type'] = 'application/json'
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    def send(self, method: str, endpoint: str, params=None, json=None, data=None, files=None,
             stream: bool = False) -> requests.Response:
        """Perform the request and raise UpstreamError on any failure."""
        url = self.build_url(endpoint)
        headers = self.build_headers(json_body=files is None and data is None)
        try:
            response = self.session.request(
                method,
                url,
                params=clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=headers,
                timeout=self.timeout,
                stream=stream,
            )
        except requests.exceptions.Timeout:
            logger.error(f"Backend request timed out: {method} {url}")
            raise UpstreamError('Backend request timed out', status_code=504)
        except requests.exceptions.RequestException as e:
            logger.error(f"Backend request failed: {method} {url}: {str(e)}")
            raise UpstreamError('Backend service unavailable', status_code=502)

        if not response.ok:
            message = extract_error_message(response)
            logger.warning(f"Backend returned {response.status_code} for {method} {endpoint}: {message}")
            try:
                payload = response.json()
            except ValueError:
                payload = None
            raise UpstreamError(message, status_code=response.status_code, payload=payload)

        return response

    def request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Perform a JSON call and return the decoded body (None for empty bodies)."""
        response = self.send(method, endpoint, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"Backend returned invalid JSON for {method} {endpoint}")
            raise UpstreamError('Invalid response from backend', status_code=502)

    def get(self, endpoint: str, params=None) -> Any:
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint: str, json=None, params=None, data=None, files=None) -> Any:
        return self.request('POST', endpoint, json=json, params=params, data=data, files=files)

    def put(self, endpoint: str, json=None, params=None) -> Any:
        return self.request('PUT', endpoint, json=json, params=params)

    def patch(self, endpoint: str, json=None, params=None) -> Any:
        return self.request('PATCH', endpoint, json=json, params=params)

    def delete(self, endpoint: str, params=None) -> Any:
        return self.request('DELETE', endpoint, params=params)

    def download(self, endpoint: str, params=None, method: str = 'GET', json=None) -> requests.Response:
        """Fetch a file (CSV/PDF) and return the raw response."""
        return self.send(method, endpoint, params=params, json=json)


def get_backend_client(request=None, token: Optional[str] = None) -> BackendClient:
    """Build a client for the caller's token, or the configured service token."""
    if token is None and request is not None:
        token = getattr(request, 'auth', None)
    if token is None:
        token = getattr(settings, 'BACKEND_API_TOKEN', '') or None
    return BackendClient(token=token)
