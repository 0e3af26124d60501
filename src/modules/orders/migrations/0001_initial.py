from decimal import Decimal

import django.db.models.deletion
import uuid6
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("discounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
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
                ("model_name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "material",
                    models.CharField(
                        choices=[("pla", "PLA"), ("pbse", "PBS-E"), ("abs", "ABS")],
                        max_length=20,
                    ),
                ),
                ("weight_grams", models.PositiveIntegerField(default=0)),
                ("delegate_sizing", models.BooleanField(default=False)),
                (
                    "delivery_method",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("fast", "Fast"),
                            ("express", "Express"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "fulfillment_mode",
                    models.CharField(
                        choices=[("delivery", "Delivery"), ("collection", "Collection")],
                        default="delivery",
                        max_length=20,
                    ),
                ),
                (
                    "shipping_location",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Barrow", "Barrow-in-Furness"),
                            ("Roose", "Roose"),
                            ("Askam", "Askam-in-Furness"),
                            ("Dalton", "Dalton-in-Furness"),
                            ("Ulverston", "Ulverston"),
                        ],
                        default="",
                        max_length=30,
                    ),
                ),
                (
                    "base_cost",
                    models.DecimalField(
                        decimal_places=3, default=Decimal("0.000"), max_digits=12
                    ),
                ),
                (
                    "discount_applied",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=10
                    ),
                ),
                (
                    "final_amount",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=10
                    ),
                ),
                (
                    "quoted_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        default=None,
                        max_digits=10,
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "discount_code",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="discounts.discountcode",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="orders_status_idx"),
                    models.Index(
                        fields=["user", "-created_at"], name="orders_user_created_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("final_amount__gte", Decimal("0"))),
                        name="orders_final_amount_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("discount_applied__gte", Decimal("0"))),
                        name="orders_discount_applied_non_negative",
                    ),
                ],
            },
        ),
    ]
