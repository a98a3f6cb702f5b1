"""
Management command to find duplicate artwork photos by pixel comparison
"""
import json
from itertools import combinations

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.core.proxy import unwrap_data
from backend.core.upstream import UpstreamError, get_backend_client
from backend.items.image_comparison import batch_compare_images, normalize_image_url


class Command(BaseCommand):
    help = "Compares item images pairwise and reports likely duplicates"

    def add_arguments(self, parser):
        parser.add_argument(
            '--urls',
            nargs='+',
            help='Explicit image URLs to compare instead of loading items from the backend',
        )
        parser.add_argument('--brand-code', type=str, help='Only items of this brand')
        parser.add_argument('--auction-id', type=str, help='Only items of this auction')
        parser.add_argument('--status', type=str, help='Only items with this status')
        parser.add_argument('--limit', type=int, default=100, help='Maximum number of items to load (default: 100)')
        parser.add_argument(
            '--threshold',
            type=float,
            default=getattr(settings, 'DUPLICATE_IMAGE_THRESHOLD', 0.1),
            help='Per-pixel colour tolerance between 0 and 1 (default: 0.1)',
        )
        parser.add_argument(
            '--max-dimension',
            type=int,
            default=getattr(settings, 'DUPLICATE_IMAGE_MAX_DIMENSION', 512),
            help='Largest side used when images are resized for comparison',
        )
        parser.add_argument(
            '--concurrency',
            type=int,
            default=getattr(settings, 'DUPLICATE_IMAGE_CONCURRENCY', 3),
            help='Comparisons run at the same time (default: 3)',
        )
        parser.add_argument('--output', type=str, help='Write the full JSON report to this file')

    def load_images(self, options):
        """Return [(label, url)] from --urls or the backend item list."""
        if options['urls']:
            return [(url, url) for url in options['urls']]

        client = get_backend_client()
        params = {
            'brand_code': options['brand_code'],
            'auction_id': options['auction_id'],
            'status': options['status'],
            'limit': options['limit'],
        }
        try:
            items = unwrap_data(client.get('/api/items', params=params)) or []
        except UpstreamError as e:
            raise CommandError(f"Could not load items: {e.message}")

        images = []
        for item in items:
            url = normalize_image_url(item.get('image_file_1'))
            if url:
                label = f"{item.get('lot_num') or item.get('id')}: {item.get('title', '')}".strip()
                images.append((label, url))
        return images

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("================================================================================"))
        self.stdout.write(self.style.SUCCESS("DUPLICATE IMAGE DETECTION"))
        self.stdout.write(self.style.SUCCESS("================================================================================"))

        images = self.load_images(options)
        if len(images) < 2:
            self.stdout.write(self.style.WARNING("Need at least two images to compare."))
            return

        labels = {}
        pairs = []
        for (label1, url1), (label2, url2) in combinations(images, 2):
            pair_id = str(len(pairs))
            labels[pair_id] = (label1, label2)
            pairs.append((pair_id, url1, url2))

        self.stdout.write(f"Images: {len(images)}")
        self.stdout.write(f"Pairs to compare: {len(pairs)}")

        results = batch_compare_images(
            pairs,
            concurrency=options['concurrency'],
            threshold=options['threshold'],
            max_dimension=options['max_dimension'],
        )

        duplicates = []
        error_count = 0
        for pair_id, result in sorted(results.items(), key=lambda entry: int(entry[0])):
            label1, label2 = labels[pair_id]
            if result.get('error'):
                error_count += 1
                self.stdout.write(self.style.ERROR(f"  ✗ {label1} / {label2}: {result['error']}"))
            elif result['is_duplicate']:
                duplicates.append({'first': label1, 'second': label2, **result})
                self.stdout.write(self.style.WARNING(
                    f"  ⊘ Duplicate ({result['similarity']:.2f}%): {label1} / {label2}"
                ))

        if options['output']:
            report = {
                'duplicates': duplicates,
                'results': {pair_id: {'first': labels[pair_id][0], 'second': labels[pair_id][1], **result}
                            for pair_id, result in results.items()},
            }
            with open(options['output'], 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2)
            self.stdout.write(f"Report written to {options['output']}")

        self.stdout.write(self.style.SUCCESS("\n================================================================================"))
        self.stdout.write(self.style.SUCCESS("SUMMARY"))
        self.stdout.write(self.style.SUCCESS("================================================================================"))
        self.stdout.write(f"Pairs Compared: {len(results)}")
        self.stdout.write(f"Duplicates Found: {len(duplicates)}")
        if error_count > 0:
            self.stdout.write(self.style.ERROR(f"Pairs with Errors: {error_count}"))
