import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Feedback",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.PositiveBigIntegerField()),
                ("user_type", models.CharField(choices=[("Donor", "Donor"), ("Hospital", "Hospital")], max_length=10)),
                ("description", models.TextField()),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("responded", "Responded")],
                    db_index=True, default="pending", max_length=10)),
                ("response_text", models.TextField(blank=True)),
                ("responded_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("responded_by", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="feedback_responses", to="accounts.adminaccount")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user_type", "user_id", "created_at"], name="feedback_author_idx"),
                ],
            },
        ),
    ]
