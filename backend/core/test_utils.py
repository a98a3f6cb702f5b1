"""
Test utilities and factories for creating test data
"""
import json
import random
import string
import uuid
from unittest import mock

import requests
from django.core.cache import cache
from rest_framework.test import APIClient

from backend.core.authentication import token_cache_key
from backend.core.cache_utils import TOKEN_VERIFY_CACHE_TTL


class TestDataFactory:
    """Factory class for creating backend-shaped test payloads"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, role='admin', brand_code='MSABER', is_active=True):
        """Create a backend user payload"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6).lower()}@test.com'
        return {
            'id': str(uuid.uuid4()),
            'email': email,
            'role': role,
            'brand_code': brand_code,
            'is_active': is_active,
        }

    @staticmethod
    def create_artist(name=None, status='active'):
        if not name:
            name = f'Artist {TestDataFactory.random_string(6)}'
        return {
            'id': str(random.randint(1, 100000)),
            'name': name,
            'nationality': 'British',
            'status': status,
        }

    @staticmethod
    def create_banking_transaction(amount=250.0, status='pending'):
        return {
            'id': str(random.randint(1, 100000)),
            'transaction_number': f'TXN-{TestDataFactory.random_string(6).upper()}',
            'type': 'deposit',
            'description': 'Test deposit',
            'amount': amount,
            'payment_method': 'bank_transfer',
            'transaction_date': '2024-01-15',
            'currency': 'GBP',
            'status': status,
            'is_reconciled': False,
        }

    @staticmethod
    def pagination(total, page=1, limit=25):
        pages = (total + limit - 1) // limit if limit else 0
        return {'page': page, 'limit': limit, 'total': total, 'pages': pages}


def make_response(status_code=200, json_data=None, content=None, content_type=None):
    """Build a real requests.Response for mocked backend calls"""
    response = requests.Response()
    response.status_code = status_code
    response._content_consumed = True
    if json_data is not None:
        response._content = json.dumps(json_data).encode()
        response.headers['Content-Type'] = content_type or 'application/json'
    else:
        response._content = content or b''
        if content_type:
            response.headers['Content-Type'] = content_type
    return response


def mock_backend(*responses):
    """
    Patch requests.Session.request for the duration of a test.

    Each call returns the next response; a single response is reused.
    """
    if len(responses) == 1:
        return mock.patch.object(requests.Session, 'request', return_value=responses[0])
    return mock.patch.object(requests.Session, 'request', side_effect=list(responses))


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a backend user payload (token check pre-cached)"""
        token = f'token-{TestDataFactory.random_string(24)}'
        cache.set(token_cache_key(token), user, TOKEN_VERIFY_CACHE_TTL)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        self.token = token
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
