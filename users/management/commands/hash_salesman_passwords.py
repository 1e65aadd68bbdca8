from django.core.management.base import BaseCommand, CommandError

from storage.store import Store
from users.auth import hash_password, is_hashed
from users.repositories import SalesmanRepository


class Command(BaseCommand):
    help = 'Replace plaintext salesman passwords left by older app builds with password hashes'

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING('Checking salesman passwords...'))

        salesmen = SalesmanRepository(Store())
        loaded = salesmen.load()
        if not loaded:
            raise CommandError(loaded.error)

        updated = []
        upgraded_count = 0
        for salesman in salesmen.all():
            if salesman.password and not is_hashed(salesman.password):
                salesman = salesman.changed(password=hash_password(salesman.password))
                upgraded_count += 1
                self.stdout.write(f"✓ Hashed password for {salesman.username} ({salesman.id})")
            updated.append(salesman)

        if not upgraded_count:
            self.stdout.write(self.style.SUCCESS('✅ All passwords are already hashed'))
            return

        result = salesmen.save(updated)
        if not result:
            raise CommandError(result.error)

        self.stdout.write(self.style.SUCCESS(f'✅ Hashed {upgraded_count} password(s)'))
