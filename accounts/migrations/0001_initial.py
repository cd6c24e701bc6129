import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AdminAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password", models.CharField(max_length=128)),
                ("last_login", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Donor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("password", models.CharField(max_length=128)),
                ("last_login", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100)),
                ("blood_group", models.CharField(
                    choices=[("A+", "A+"), ("A-", "A-"), ("B+", "B+"), ("B-", "B-"),
                             ("AB+", "AB+"), ("AB-", "AB-"), ("O+", "O+"), ("O-", "O-")],
                    max_length=3)),
                ("age", models.PositiveSmallIntegerField(validators=[
                    django.core.validators.MinValueValidator(18),
                    django.core.validators.MaxValueValidator(65),
                ])),
                ("gender", models.CharField(
                    choices=[("Male", "Male"), ("Female", "Female"), ("Other", "Other")], max_length=6)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(max_length=100)),
                ("phone", models.CharField(max_length=20)),
                ("is_available", models.BooleanField(default=True)),
                ("donations", models.PositiveIntegerField(default=0)),
                ("last_donation", models.DateField(blank=True, null=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["blood_group", "is_available"], name="donor_group_available_idx"),
                ],
            },
        ),
    ]
