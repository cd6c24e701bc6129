import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="History",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.PositiveBigIntegerField(db_index=True)),
                ("user_type", models.CharField(
                    choices=[("Donor", "Donor"), ("Hospital", "Hospital"), ("Admin", "Admin")], max_length=10)),
                ("action", models.CharField(max_length=60)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("date", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "verbose_name_plural": "History",
                "ordering": ["-date"],
                "indexes": [
                    models.Index(fields=["user_type", "user_id", "date"], name="history_user_date_idx"),
                ],
            },
        ),
    ]
