"""
Management command to push a CSV file through the backend's import endpoints
"""
import os

from django.core.management.base import BaseCommand, CommandError

from backend.core.csv_utils import parse_csv_text
from backend.core.exceptions import CSVParseError
from backend.core.upstream import UpstreamError, get_backend_client
from backend.logistics.views import LOGISTICS_CSV_FIELD_MAPPING

IMPORT_RESOURCES = ['items', 'clients', 'auctions', 'consignments', 'logistics']


def build_import_request(resource, text, platform='database', validate_only=False):
    """
    Endpoint and JSON body for importing CSV text.

    Returns (endpoint, payload, row_count); row_count is None for items and
    clients, which the backend parses itself.
    """
    if resource == 'items':
        return '/api/items/upload/csv', {'csvData': text, 'platform': platform, 'validateOnly': validate_only}, None
    if resource == 'clients':
        endpoint = '/api/clients/validate-csv' if validate_only else '/api/clients/upload-csv'
        return endpoint, {'csv_data': text}, None
    if resource == 'logistics':
        rows = parse_csv_text(text, field_mapping=LOGISTICS_CSV_FIELD_MAPPING)
        return '/api/logistics/import/csv', {'csvData': rows}, len(rows)
    rows = parse_csv_text(text, snake_case_headers=True)
    return f'/api/{resource}/upload/csv', {'csv_data': rows}, len(rows)


class Command(BaseCommand):
    help = "Imports items, clients, auctions, consignments or logistics entries from a CSV file"

    def add_arguments(self, parser):
        parser.add_argument('resource', choices=IMPORT_RESOURCES)
        parser.add_argument('csv_file', type=str, help='Path to the CSV file')
        parser.add_argument(
            '--platform',
            type=str,
            default='database',
            help='Item CSV format (database, liveauctioneers, easy_live, invaluable, the_saleroom)',
        )
        parser.add_argument(
            '--validate-only',
            action='store_true',
            help='Ask the backend to validate item or client rows without saving them',
        )
        parser.add_argument('--token', type=str, help='Bearer token (default: BACKEND_API_TOKEN)')

    def handle(self, *args, **options):
        resource = options['resource']
        csv_file = options['csv_file']

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS(f"IMPORTING {resource.upper()} FROM CSV"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(f"CSV File: {csv_file}")

        if not os.path.exists(csv_file):
            raise CommandError(f"CSV file not found at {csv_file}")

        with open(csv_file, 'r', encoding='utf-8-sig') as f:
            text = f.read()

        try:
            endpoint, payload, row_count = build_import_request(
                resource, text, platform=options['platform'], validate_only=options['validate_only'],
            )
        except CSVParseError as e:
            raise CommandError(str(e))

        if row_count is not None:
            self.stdout.write(f"Rows parsed: {row_count}")

        client = get_backend_client(token=options.get('token'))
        try:
            result = client.post(endpoint, json=payload)
        except UpstreamError as e:
            raise CommandError(f"Import failed: {e}")

        if not isinstance(result, dict):
            result = {}
        errors = result.get('errors') or []
        for error in errors:
            self.stdout.write(self.style.WARNING(f"  ⚠ {error}"))

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 80))
        self.stdout.write(self.style.SUCCESS("IMPORT SUMMARY"))
        self.stdout.write(self.style.SUCCESS("=" * 80))
        for key in ['imported', 'imported_count', 'updated', 'success', 'failed']:
            if key in result and not isinstance(result[key], (dict, list)):
                self.stdout.write(f"{key.replace('_', ' ').title()}: {result[key]}")
        if errors:
            self.stdout.write(self.style.WARNING(f"Errors: {len(errors)}"))
        else:
            self.stdout.write(self.style.SUCCESS("Completed without errors"))
