from django.db import models

from accounts.models import Role


class Feedback(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        RESPONDED = "responded", "Responded"

    # author kinds that may submit feedback, by History-style user type
    AUTHOR_ROLES = {
        "Donor": Role.DONOR,
        "Hospital": Role.HOSPITAL,
    }

    user_id = models.PositiveBigIntegerField()
    user_type = models.CharField(max_length=10, choices=[(t, t) for t in AUTHOR_ROLES])
    description = models.TextField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)

    response_text = models.TextField(blank=True)
    responded_by = models.ForeignKey(
        "accounts.AdminAccount", null=True, blank=True, on_delete=models.SET_NULL, related_name="feedback_responses"
    )
    responded_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_type", "user_id", "created_at"], name="feedback_author_idx"),
        ]

    def __str__(self):
        return f"{self.user_type}#{self.user_id} feedback ({self.status})"

    @property
    def author_role(self):
        return self.AUTHOR_ROLES[self.user_type]

    def to_dict(self, author=None):
        data = {
            "_id": self.pk,
            "userId": self.user_id,
            "userType": self.user_type,
            "description": self.description,
            "status": self.status,
            "response": None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if self.status == self.Status.RESPONDED:
            data["response"] = {
                "text": self.response_text,
                "adminId": self.responded_by_id,
                "timestamp": self.responded_at.isoformat() if self.responded_at else None,
            }
        if author is not None:
            data["user"] = {"_id": author.pk, "name": author.name, "email": author.email}
        return data
