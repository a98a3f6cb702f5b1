"""
Shared helpers for gateway views: filter handling, list normalisation and
file passthrough.
"""
from datetime import timedelta

from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone

EMPTY_PAGINATION = {'page': 1, 'limit': 0, 'total': 0, 'pages': 0}


def query_filters(request, allowed=None):
    """
    Collect query parameters as a plain dict.

    Repeated keys are kept as lists; with `allowed`, unknown keys are dropped.
    """
    filters = {}
    for key in request.query_params.keys():
        if allowed is not None and key not in allowed:
            continue
        values = request.query_params.getlist(key)
        filters[key] = values if len(values) > 1 else values[0]
    return filters


def default_date_range(filters, days=30):
    """Fill a missing date_from/date_to with the last `days` days (ISO dates)."""
    if filters.get('date_from') and filters.get('date_to'):
        return filters
    today = timezone.localdate()
    scoped = dict(filters)
    scoped['date_from'] = filters.get('date_from') or (today - timedelta(days=days)).isoformat()
    scoped['date_to'] = filters.get('date_to') or today.isoformat()
    return scoped


def apply_brand_scope(request, filters):
    """
    Non super admins always list within one brand.

    Falls back to the X-Brand-Code header, the user's brand and finally
    settings.DEFAULT_BRAND_CODE.
    """
    user = request.user
    if getattr(user, 'is_super_admin', False) or filters.get('brand_code'):
        return filters
    scoped = dict(filters)
    scoped['brand_code'] = (
        request.headers.get('X-Brand-Code')
        or getattr(user, 'brand_code', None)
        or getattr(settings, 'DEFAULT_BRAND_CODE', 'MSABER')
    )
    return scoped


def normalize_list_payload(payload, key):
    """
    Backend lists come either as {success, data, pagination} or a bare list.

    Returns {key: [...], 'pagination': {...}}.
    """
    if isinstance(payload, list):
        total = len(payload)
        return {key: payload, 'pagination': {'page': 1, 'limit': total, 'total': total, 'pages': 1}}
    if isinstance(payload, dict):
        if payload.get('success'):
            return {
                key: payload.get('data') or [],
                'pagination': payload.get('pagination') or dict(EMPTY_PAGINATION),
            }
        if key in payload:
            return {key: payload.get(key) or [], 'pagination': payload.get('pagination') or dict(EMPTY_PAGINATION)}
    return {key: [], 'pagination': dict(EMPTY_PAGINATION)}


def unwrap_data(payload):
    """Return payload['data'] for {success, data} envelopes, else the payload itself."""
    if isinstance(payload, dict) and 'data' in payload and 'success' in payload:
        return payload['data']
    return payload


def dated_filename(prefix, extension='csv'):
    return f"{prefix}-{timezone.localdate().isoformat()}.{extension}"


def file_response(upstream_response, filename, content_type='application/octet-stream'):
    """Pass a downloaded file through as an attachment."""
    response = HttpResponse(
        upstream_response.content,
        content_type=upstream_response.headers.get('Content-Type') or content_type,
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def csv_response(text, filename):
    response = HttpResponse(text, content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def multipart_payload(request):
    """
    Split an incoming multipart request into (data, files) for requests.

    Uploaded files are re-sent with their original name and content type.
    """
    data = {key: request.data.get(key) for key in request.data.keys() if key not in request.FILES}
    files = [
        (field, (upload.name, upload.read(), upload.content_type or 'application/octet-stream'))
        for field, upload in request.FILES.items()
    ]
    return data, files
