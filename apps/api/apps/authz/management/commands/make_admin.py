"""
Grant the ADMIN role to users by e-mail.

Usage:
    python manage.py make_admin inspector@example.com

The user must have signed in at least once so that a local row exists.
"""
from django.core.management.base import BaseCommand, CommandError
from apps.authz.models import User, RoleChoices


class Command(BaseCommand):
    help = 'Set role ADMIN for every user with the given e-mail address'

    def add_arguments(self, parser):
        parser.add_argument('email', help='E-mail address as mirrored from the identity provider')

    def handle(self, *args, **options):
        email = options['email'].strip()
        users = User.objects.filter(email__iexact=email)
        matched = list(users.values_list('email', flat=True))

        if not matched:
            raise CommandError(f'No user with e-mail "{email}" (has this person signed in yet?)')

        users.update(role=RoleChoices.ADMIN)

        self.stdout.write(self.style.SUCCESS(f'✓ Role ADMIN set for: {", ".join(matched)}'))
