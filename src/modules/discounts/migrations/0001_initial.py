from decimal import Decimal

import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DiscountCode",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("code", models.CharField(max_length=64, unique=True)),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("percent", "Percentage"), ("fixed", "Fixed amount")],
                        max_length=10,
                    ),
                ),
                (
                    "discount_value",
                    models.DecimalField(decimal_places=2, max_digits=10),
                ),
                ("active", models.BooleanField(default=True)),
                (
                    "expires_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("max_uses", models.IntegerField(default=-1)),
                ("uses", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "discount_codes",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("max_uses__gte", -1)),
                        name="discount_codes_max_uses_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("max_uses", -1),
                            ("uses__lte", models.F("max_uses")),
                            _connector="OR",
                        ),
                        name="discount_codes_uses_within_limit",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("discount_value__gte", Decimal("0"))),
                        name="discount_codes_value_non_negative",
                    ),
                ],
            },
        ),
    ]
