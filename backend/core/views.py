import logging

from django.core.cache import cache
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .authentication import token_cache_key
from .constants import (
    AUCTION_PLATFORMS, AUCTION_TYPES, AUCTION_SUBTYPES, AUCTION_STATUSES,
    CONSIGNMENT_STATUSES, SORTING_MODES, ESTIMATES_VISIBILITY, TIME_ZONES,
    ITEM_PLATFORMS, BRAND_CODES,
)
from .serializers import LoginSerializer
from .upstream import get_backend_client

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Exchange email/password for a backend token"""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    client = get_backend_client(token='')
    data = client.post('/api/auth/login', json=serializer.validated_data)
    if data and data.get('error'):
        return Response({'error': data['error']}, status=status.HTTP_401_UNAUTHORIZED)
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Log out upstream and forget the cached token check"""
    client = get_backend_client(request)
    data = client.post('/api/auth/logout')
    cache.delete(token_cache_key(request.auth))
    return Response(data or {'message': 'Logged out'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with role-derived access flags"""
    user_data = dict(request.user.data)
    user_data['is_super_admin'] = request.user.is_super_admin
    user_data['has_admin_access'] = request.user.has_admin_access
    return Response(user_data)


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Gateway and backend health"""
    client = get_backend_client(token='')
    backend = client.get('/api/health')
    return Response({'status': 'ok', 'backend': backend})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def choices(request):
    """Choice lists used by auction and consignment forms"""
    def as_options(pairs):
        return [{'value': value, 'label': label} for value, label in pairs]

    return Response({
        'auction_platforms': as_options(AUCTION_PLATFORMS),
        'auction_types': as_options(AUCTION_TYPES),
        'auction_subtypes': as_options(AUCTION_SUBTYPES),
        'auction_statuses': as_options(AUCTION_STATUSES),
        'consignment_statuses': as_options(CONSIGNMENT_STATUSES),
        'sorting_modes': as_options(SORTING_MODES),
        'estimates_visibility': as_options(ESTIMATES_VISIBILITY),
        'time_zones': as_options(TIME_ZONES),
        'item_platforms': ITEM_PLATFORMS,
        'brand_codes': BRAND_CODES,
    })
