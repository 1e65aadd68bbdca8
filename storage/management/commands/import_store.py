import json

from django.core.management.base import BaseCommand, CommandError

from storage.keys import ALL_KEYS
from storage.store import Store


class Command(BaseCommand):
    help = 'Load a JSON dump of the mobile app storage ({key: value}) into the local store'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Path to the JSON dump')
        parser.add_argument(
            '--all-keys',
            action='store_true',
            help='Also import keys the application does not use',
        )

    def handle(self, *args, **options):
        path = options['path']
        try:
            with open(path, encoding='utf-8') as fh:
                dump = json.load(fh)
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")
        except ValueError as e:
            raise CommandError(f"{path} is not valid JSON: {e}")

        if not isinstance(dump, dict):
            raise CommandError("Expected a JSON object mapping keys to values")

        store = Store()
        imported = 0
        skipped = 0

        with store.atomic():
            for key, value in dump.items():
                if key not in ALL_KEYS and not options['all_keys']:
                    self.stdout.write(f"- Skipping unknown key: {key}")
                    skipped += 1
                    continue

                # AsyncStorage dumps hold strings; nested JSON is re-encoded
                raw = value if isinstance(value, str) else json.dumps(value)
                store.set(key, raw)
                imported += 1
                self.stdout.write(self.style.SUCCESS(f"✓ Imported {key}"))

        self.stdout.write(self.style.SUCCESS(f'\nImported {imported} key(s), skipped {skipped}'))
        if imported:
            self.stdout.write("Run `manage.py hash_salesman_passwords` if the dump holds plaintext passwords.")
