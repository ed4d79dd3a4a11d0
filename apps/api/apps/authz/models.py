"""
Authz models: users linked 1:1 to an external identity provider subject.
"""
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin


# ============================================================================
# Enums
# ============================================================================

class RoleChoices(models.TextChoices):
    """
    Application roles.

    - ADMIN: registers requests and work days, may delete requests
    - INSPECTOR: logs daily completed counts (entries)
    """
    ADMIN = 'ADMIN', 'Admin'
    INSPECTOR = 'INSPECTOR', 'Inspector'


# ============================================================================
# User Management
# ============================================================================

class UserManager(BaseUserManager):
    """Users are keyed by the identity provider's subject id; no local passwords."""

    def create_user(self, external_id, email, name, **extra_fields):
        if not external_id:
            raise ValueError('External subject id is required')
        user = self.model(
            external_id=external_id,
            email=self.normalize_email(email),
            name=name,
            **extra_fields
        )
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, external_id, email, name='Admin', password=None, **extra_fields):
        """Django admin access; also grants the ADMIN application role."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', RoleChoices.ADMIN)
        user = self.create_user(external_id, email, name, **extra_fields)
        if password:
            user.set_password(password)
            user.save(using=self._db)
        return user


class User(AbstractBaseUser, PermissionsMixin):
    """
    Local mirror of an identity-provider user.

    Created on first authenticated access (see ``apps.authz.provisioning``).
    Name and e-mail are copied once and not re-synced afterwards.
    """
    external_id = models.CharField(
        max_length=191,
        unique=True,
        help_text='Subject id issued by the external identity provider'
    )
    name = models.CharField(max_length=191)
    email = models.EmailField(max_length=191)
    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.INSPECTOR
    )
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Required for Django admin access
    created_at = models.DateTimeField(auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = 'external_id'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['email']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['email'], name='idx_user_email'),
            models.Index(fields=['role'], name='idx_user_role'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def is_admin(self):
        return self.role == RoleChoices.ADMIN
