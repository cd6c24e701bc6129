import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Hospital",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password", models.CharField(max_length=128)),
                ("last_login", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("license_number", models.CharField(max_length=100, unique=True)),
                ("contact_person", models.CharField(max_length=100)),
                ("phone", models.CharField(max_length=30)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(max_length=100)),
                ("is_verified", models.BooleanField(default=False)),
                ("requests_made", models.PositiveIntegerField(default=0)),
                ("requests_completed", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="BloodCamp",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("location", models.CharField(max_length=255)),
                ("date", models.DateTimeField(db_index=True)),
                ("time", models.CharField(help_text="Display time, e.g. 10:00 AM - 4:00 PM", max_length=50)),
                ("contact_info", models.CharField(max_length=200)),
                ("status", models.CharField(
                    choices=[("upcoming", "Upcoming"), ("ongoing", "Ongoing"),
                             ("completed", "Completed"), ("cancelled", "Cancelled")],
                    db_index=True, default="upcoming", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("hospital", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="camps", to="hospitals.hospital")),
            ],
            options={
                "ordering": ["date"],
            },
        ),
        migrations.CreateModel(
            name="CampInterest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(
                    choices=[("registered", "Registered"), ("attended", "Attended"), ("no-show", "No-show")],
                    default="registered", max_length=10)),
                ("registered_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("camp", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="interests", to="hospitals.bloodcamp")),
                ("donor", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="camp_interests", to="accounts.donor")),
            ],
            options={
                "ordering": ["registered_at", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("camp", "donor"), name="uniq_camp_interest_camp_donor"),
                ],
            },
        ),
    ]
