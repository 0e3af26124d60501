from __future__ import annotations

import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.accounts.models import Profile
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.services import AccountService
from modules.discounts.repositories.django_repository import (
    DiscountCodeDjangoRepository,
)
from modules.discounts.services import DiscountService
from modules.orders.constants import (
    DeliveryMethod,
    FulfillmentMode,
    Material,
    OrderStatus,
    ShippingLocation,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

SEED_PASSWORD = "Seed-Passw0rd!"

CUSTOMERS = [
    ("alice", "alice@example.com", "12 Duke Street, Barrow-in-Furness"),
    ("ben", "ben@example.com", "3 Market Place, Ulverston"),
    ("chloe", "chloe@example.com", "7 Station Road, Askam-in-Furness"),
    ("dev", "dev@example.com", "21 Tudor Square, Dalton-in-Furness"),
]

DISCOUNTS = [
    {"code": "WELCOME10", "discount_type": "percent", "discount_value": "10",
     "description": "10% off your first print", "max_uses": -1},
    {"code": "FIVEOFF", "discount_type": "fixed", "discount_value": "5.00",
     "description": "£5 off", "max_uses": 20},
    {"code": "ONEOFF", "discount_type": "percent", "discount_value": "50",
     "description": "Half price, single use", "max_uses": 1},
]

MODELS = ["Benchy", "Phone stand", "Cable clip", "Planter", "Chess set", "Lithophane"]


class Command(BaseCommand):
    help = "Seed the database with development users, discount codes and orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=20)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        order_service = OrderService(
            order_repository=OrderDjangoRepository(),
            discount_repository=DiscountCodeDjangoRepository(),
        )
        users = self._seed_users(AccountService(UserDjangoRepository(), order_service))
        discounts_created = self._seed_discounts()
        orders_created = self._seed_orders(order_service, users, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"discounts={discounts_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self, accounts: AccountService) -> list:
        self.stdout.write("Creating users...")
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            admin = User.objects.create_superuser("admin", password=SEED_PASSWORD)
            Profile.objects.create(user=admin)

        users = []
        for username, email, address in CUSTOMERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = accounts.sign_up(
                    {
                        "username": username,
                        "password": SEED_PASSWORD,
                        "email": email,
                        "shipping_address": address,
                    }
                )
            users.append(user)
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_discounts(self) -> int:
        self.stdout.write("Creating discount codes...")
        repository = DiscountCodeDjangoRepository()
        service = DiscountService(repository)
        created = 0
        for data in DISCOUNTS:
            if repository.get_by_code(data["code"]) is None:
                service.create_discount(data)
                created += 1
        self.stdout.write(self.style.SUCCESS("Creating discount codes... Done!"))
        return created

    def _seed_orders(self, service: OrderService, users: list, count: int) -> int:
        self.stdout.write("Creating orders...")
        if service.list_orders():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        codes = [None, None, None] + [d["code"] for d in DISCOUNTS]
        for i in range(count):
            collection = random.random() < 0.2
            details = {
                "material": random.choice(Material.values),
                "weight_grams": random.randint(20, 600),
                "delivery_method": random.choice(DeliveryMethod.values),
                "fulfillment_mode": (
                    FulfillmentMode.COLLECTION if collection else FulfillmentMode.DELIVERY
                ),
                "shipping_location": (
                    None if collection else random.choice(ShippingLocation.values)
                ),
                "discount_code": random.choice(codes),
            }
            quote = service.quote_order(details)
            order = service.finalize_order(
                {
                    **details,
                    "user_id": random.choice(users).id,
                    "model_name": random.choice(MODELS),
                    "price": quote.final_amount,
                }
            )

            new_status = random.choice(OrderStatus.values)
            if new_status != OrderStatus.PENDING:
                service.update_status(str(order.id), new_status)

            created_at = timezone.now() - timedelta(days=random.randint(0, 30))
            Order.objects.filter(id=order.id).update(created_at=created_at)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
