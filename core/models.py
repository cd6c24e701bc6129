from django.db import models
from django.utils import timezone


class History(models.Model):
    """
    Audit trail of account and camp activity (register, login, interest, attendance...).
    """
    USER_TYPES = [
        ("Donor", "Donor"),
        ("Hospital", "Hospital"),
        ("Admin", "Admin"),
    ]

    user_id = models.PositiveBigIntegerField(db_index=True)
    user_type = models.CharField(max_length=10, choices=USER_TYPES)
    action = models.CharField(max_length=60)
    details = models.JSONField(default=dict, blank=True)
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-date"]
        verbose_name_plural = "History"
        indexes = [
            models.Index(fields=["user_type", "user_id", "date"], name="history_user_date_idx"),
        ]

    def __str__(self):
        return f"{self.user_type}#{self.user_id} {self.action}"
