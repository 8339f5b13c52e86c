"""
Core — Audit Service

Writes audit log entries on behalf of any app. Call it inside the same
``transaction.atomic`` block as the write being audited so the entry
commits or rolls back with it.

@file core/services.py
"""

from typing import Any

from django.db import models

from core.constants import AUDIT_ACTION_CREATE
from core.models import AuditLog


class AuditService:

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        return AuditLog.objects.create(
            actor=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=old_values,
            new_values=new_values,
        )

    @staticmethod
    def log_insert(instance: models.Model, *, actor, values: dict[str, Any]) -> AuditLog:
        """CREATE entry for a freshly inserted row, named after its model class."""
        return AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name=instance._meta.object_name,
            object_id=instance.pk,
            new_values=values,
        )

    @staticmethod
    def trail(model_name: str, object_id) -> models.QuerySet:
        """Entries for one object, oldest first."""
        return AuditLog.objects.filter(
            model_name=model_name, object_id=str(object_id),
        ).order_by('timestamp')
