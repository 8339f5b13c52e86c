"""
Users — Models

Email-authenticated user with a single operational role. The user is
the acting principal stamped on every ledger entry.

@file users/models.py
"""

import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin
from users.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin, TimestampMixin):
    """
    Platform user.

    ``role`` decides who may record stock movements: admins and warehouse
    staff write to the ledger, everyone authenticated may read it.
    """

    class RoleChoices(models.TextChoices):
        ADMIN = 'admin', _('Administrator')
        WAREHOUSE = 'warehouse', _('Warehouse')
        SALES = 'sales', _('Sales')
        VIEWER = 'viewer', _('Viewer')

    INVENTORY_ROLES = {RoleChoices.ADMIN, RoleChoices.WAREHOUSE}

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    email = models.EmailField(_('email'), unique=True)
    full_name = models.CharField(_('full name'), max_length=200, blank=True)
    role = models.CharField(
        _('role'), max_length=12,
        choices=RoleChoices.choices, default=RoleChoices.VIEWER,
        db_index=True,
    )

    is_staff = models.BooleanField(_('staff status'), default=False)
    is_active = models.BooleanField(_('active'), default=True)
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['email']

    def __str__(self):
        return self.get_full_name()

    def get_full_name(self):
        return self.full_name.strip() or self.email

    def get_short_name(self):
        return self.full_name.split(' ')[0] if self.full_name else self.email

    @property
    def can_manage_inventory(self) -> bool:
        return self.is_superuser or self.role in self.INVENTORY_ROLES
