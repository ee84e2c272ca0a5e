from django.core.management.base import BaseCommand

from admin_auth.models import AdminCredential
from admin_auth.passwords import is_bcrypt_hash


class Command(BaseCommand):
    help = "Replace plaintext admin passwords with bcrypt hashes."

    def handle(self, *args, **options):
        updated = 0
        for credential in AdminCredential.objects.all():
            if is_bcrypt_hash(credential.password):
                self.stdout.write(f"'{credential.username}' already hashed")
                continue
            credential.set_password(credential.password)
            credential.save(update_fields=["password"])
            updated += 1
            self.stdout.write(f"  → hashed password for '{credential.username}'")

        self.stdout.write(self.style.SUCCESS(f"Hashed {updated} password(s)."))
