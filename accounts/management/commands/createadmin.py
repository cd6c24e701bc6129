from getpass import getpass

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import AdminAccount
from core.history import record


class Command(BaseCommand):
    help = "Create (or reset the password of) a platform admin account."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--name", default="Administrator")
        parser.add_argument("--password", default=None, help="Prompted for when omitted")

    @transaction.atomic
    def handle(self, *args, **opts):
        email = opts["email"].strip().lower()
        password = opts["password"] or getpass("Password: ")
        if len(password) < 6:
            raise CommandError("Password must be at least 6 characters.")

        admin, created = AdminAccount.objects.get_or_create(email=email, defaults={"name": opts["name"]})
        admin.set_password(password)
        admin.save()

        if created:
            record(admin, "register", email=admin.email)
            self.stdout.write(self.style.SUCCESS(f"Admin created: {email}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Admin password updated: {email}"))
