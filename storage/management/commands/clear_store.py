from django.core.management.base import BaseCommand

from storage.keys import ALL_KEYS
from storage.store import Store, StoreError


class Command(BaseCommand):
    help = 'Removes every key from the local store (shops, products, sales, salesmen and sessions).'

    def add_arguments(self, parser):
        parser.add_argument(
            '--key',
            action='append',
            dest='keys',
            help='Only remove this key (can be repeated)',
        )

    def handle(self, *args, **options):
        store = Store()
        keys = options.get('keys') or sorted(set(ALL_KEYS) | set(store.keys()))

        self.stdout.write(self.style.WARNING(f'⚠️  Clearing {len(keys)} key(s) from the local store...'))

        failed = 0
        for key in keys:
            try:
                store.remove(key)
                self.stdout.write(self.style.SUCCESS(f"Removed {key}"))
            except StoreError as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f"Failed to remove {key}: {e}"))

        if failed:
            self.stdout.write(self.style.ERROR(f'❌ {failed} key(s) could not be removed'))
        else:
            self.stdout.write(self.style.SUCCESS('✅ Local store cleared successfully!'))
