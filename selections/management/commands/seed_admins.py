"""
Create or update administrator accounts from settings.SEED_ADMINS.

Each entry is "email:password". The email becomes both the username and the
email of the Django user, so it is also the identifier stored on the
administrator's selection rows. Existing accounts get their password reset.

Usage:
    SEED_ADMINS="jane.doe@example.com:s3cret,john@example.com:hunter2" \
        python manage.py seed_admins
"""

from django.conf import settings # pyright: ignore[reportMissingModuleSource]
from django.contrib.auth import get_user_model # pyright: ignore[reportMissingModuleSource]
from django.core.management.base import BaseCommand, CommandError # pyright: ignore[reportMissingModuleSource]
from django.db import transaction # pyright: ignore[reportMissingModuleSource]


def parse_seed_entries(entries):
    """
    Split "email:password" entries.

    Raises:
        CommandError: an entry has no ":" or an empty email/password
    """
    accounts = []
    for entry in entries:
        entry = entry.strip()
        if not entry:
            continue
        email, sep, password = entry.partition(':')
        if not sep or not email.strip() or not password:
            raise CommandError(f'Invalid SEED_ADMINS entry for "{email.strip()}": expected email:password')
        accounts.append((email.strip(), password))
    return accounts


class Command(BaseCommand):
    help = 'Create or update administrator accounts listed in SEED_ADMINS.'

    def handle(self, *args, **options):
        accounts = parse_seed_entries(settings.SEED_ADMINS)
        if not accounts:
            raise CommandError('SEED_ADMINS is empty; nothing to seed.')

        allowed = {identity.strip().lower() for identity in settings.ADMIN_ALLOWLIST}
        User = get_user_model()

        self.stdout.write('Starting admin user seeding process...')

        with transaction.atomic():
            for email, password in accounts:
                user = User.objects.filter(username__iexact=email).first()
                if user is None:
                    user = User(username=email, email=email)
                    user.set_password(password)
                    user.save()
                    self.stdout.write(self.style.SUCCESS(f'Created user {email}'))
                else:
                    user.set_password(password)
                    user.save(update_fields=['password'])
                    self.stdout.write(self.style.SUCCESS(f'Updated password for {email}'))

                if email.lower() not in allowed:
                    self.stdout.write(self.style.WARNING(
                        f'{email} is not in ADMIN_ALLOWLIST and cannot use the admin endpoints'
                    ))

        self.stdout.write('Admin user seeding process complete.')
