from getpass import getpass

from django.core.management.base import BaseCommand, CommandError

from admin_auth.models import AdminCredential


class Command(BaseCommand):
    help = "Create an admin login, or reset the password of an existing one."

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("--password", help="Password to set (prompted when omitted).")
        parser.add_argument("--inactive", action="store_true", help="Create the login disabled.")

    def handle(self, *args, **options):
        username = options["username"].strip()
        if not username:
            raise CommandError("Username must not be empty.")

        password = options.get("password") or getpass("Password: ")
        if not password:
            raise CommandError("Password must not be empty.")

        credential, created = AdminCredential.objects.get_or_create(username=username)
        credential.set_password(password)
        credential.is_active = not options["inactive"]
        credential.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created admin '{username}'"))
        else:
            self.stdout.write(f"Admin '{username}' already exists, password reset")
