import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("registration_confirmed", "Registration Confirmed"),
                            ("registration_pending", "Registration Pending"),
                            ("registration_waitlisted", "Registration Waitlisted"),
                            ("registration_rejected", "Registration Rejected"),
                            ("registration_cancelled", "Registration Cancelled"),
                            ("waitlist_promoted", "Waitlist Promoted"),
                            ("checked_in", "Checked In"),
                            ("ticket_offer_created", "Ticket Offer Created"),
                            ("ticket_offer_received", "Ticket Offer Received"),
                            ("ticket_transferred", "Ticket Transferred"),
                            ("ticket_received", "Ticket Received"),
                        ],
                        db_index=True,
                        max_length=50,
                    ),
                ),
                ("context", models.JSONField(blank=True, default=dict)),
                (
                    "dispatched_at",
                    models.DateTimeField(blank=True, help_text="When the dispatcher task picked it up", null=True),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="notification_user_created_idx"),
                ],
            },
        ),
    ]
