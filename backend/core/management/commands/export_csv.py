"""
Management command to download a CSV export from the backend
"""
from django.core.management.base import BaseCommand, CommandError

from backend.core.proxy import dated_filename
from backend.core.upstream import UpstreamError, get_backend_client

EXPORT_RESOURCES = ['items', 'clients', 'auctions', 'consignments', 'artists', 'schools', 'galleries', 'logistics']


class Command(BaseCommand):
    help = "Downloads a CSV export of one resource"

    def add_arguments(self, parser):
        parser.add_argument('resource', choices=EXPORT_RESOURCES)
        parser.add_argument('--output', type=str, help='File to write (default: <resource>-export-<date>.csv)')
        parser.add_argument(
            '--filter',
            action='append',
            default=[],
            metavar='KEY=VALUE',
            help='Query filter passed to the export, repeatable (e.g. --filter status=active)',
        )
        parser.add_argument('--token', type=str, help='Bearer token (default: BACKEND_API_TOKEN)')

    def parse_filters(self, raw_filters):
        filters = {}
        for raw in raw_filters:
            key, sep, value = raw.partition('=')
            if not sep or not key:
                raise CommandError(f"Invalid filter '{raw}', expected KEY=VALUE")
            filters[key.strip()] = value.strip()
        return filters

    def handle(self, *args, **options):
        resource = options['resource']
        filters = self.parse_filters(options['filter'])
        output = options.get('output') or dated_filename(f'{resource}-export')

        client = get_backend_client(token=options.get('token'))
        try:
            upstream = client.download(f'/api/{resource}/export/csv', params=filters)
        except UpstreamError as e:
            raise CommandError(f"Export failed: {e}")

        with open(output, 'wb') as f:
            f.write(upstream.content)

        line_count = max(len(upstream.content.splitlines()) - 1, 0)
        self.stdout.write(self.style.SUCCESS(f"✓ Exported {line_count} {resource} rows to {output}"))
