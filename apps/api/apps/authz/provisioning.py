"""
User provisioning: find-or-create the local User for an external identity.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.authz.models import User, RoleChoices
from apps.core.observability import metrics
from apps.core.observability.events import log_user_provisioned


@dataclass(frozen=True)
class ExternalIdentity:
    """Profile of the caller as reported by the identity provider."""
    subject_id: Optional[str]
    email_addresses: List[str] = field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def primary_email(self):
        """First known address, or a placeholder derived from the subject id."""
        for address in self.email_addresses:
            if address:
                return address
        domain = settings.LEGALIZATION['PLACEHOLDER_EMAIL_DOMAIN']
        return f"{self.subject_id}@{domain}"

    @property
    def display_name(self):
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return ' '.join(parts) or settings.LEGALIZATION['FALLBACK_INSPECTOR_NAME']


def _lookup(subject_id: str) -> Optional[User]:
    return User.objects.filter(external_id=subject_id).first()


def ensure_user(identity: ExternalIdentity) -> Optional[User]:
    """
    Return the User linked to ``identity``, creating it on first sight.

    Returns None when the caller is not authenticated (no subject id).
    Existing users are returned unchanged: name and e-mail are mirrored
    only once.

    Two concurrent first calls may both miss the lookup; the unique
    ``external_id`` column makes the second insert fail, and that caller
    re-reads the row written by the first.
    """
    if not identity.subject_id:
        return None

    user = _lookup(identity.subject_id)
    if user is not None:
        return user

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                external_id=identity.subject_id,
                email=identity.primary_email,
                name=identity.display_name,
                role=RoleChoices.INSPECTOR,
            )
    except IntegrityError:
        user = User.objects.get(external_id=identity.subject_id)
        metrics.users_provisioned_total.labels(result='race_recovered').inc()
        log_user_provisioned(user, result='race_recovered')
        return user

    metrics.users_provisioned_total.labels(result='created').inc()
    log_user_provisioned(user)
    return user
