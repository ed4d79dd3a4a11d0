"""
DRF authentication backed by the external identity provider's JWTs.
"""
from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from apps.authz.provisioning import ExternalIdentity, ensure_user
from apps.core.observability.correlation import bind_user


def identity_from_claims(claims) -> ExternalIdentity:
    """
    Build the caller's profile from token claims.

    Accepts either a single ``email`` or an ``emails`` list, and OIDC
    (``given_name``/``family_name``) or plain (``first_name``/``last_name``)
    name claims.
    """
    emails = claims.get('emails') or []
    if isinstance(emails, str):
        emails = [emails]
    if claims.get('email'):
        emails = [claims['email'], *emails]

    return ExternalIdentity(
        subject_id=claims.get(api_settings.USER_ID_CLAIM),
        email_addresses=list(emails),
        first_name=claims.get('given_name') or claims.get('first_name'),
        last_name=claims.get('family_name') or claims.get('last_name'),
    )


class ExternalIdentityAuthentication(JWTAuthentication):
    """
    Authenticate a bearer token and provision the local User.

    Every authenticated request therefore carries a persisted User, so
    writes that attribute authorship never run without an actor row.
    """

    def get_user(self, validated_token):
        identity = identity_from_claims(validated_token.payload)
        if not identity.subject_id:
            raise InvalidToken(_('Token contained no recognizable user identification'))

        user = ensure_user(identity)
        if not user.is_active:
            raise AuthenticationFailed(_('User is inactive'), code='user_inactive')

        bind_user(user)
        return user
