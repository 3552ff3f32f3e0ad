from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.core.exceptions import DomainError
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import CreateProductDTO
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATALOG = [
    ("ELEC-001", "Monitor 27\"", Decimal("1299.90")),
    ("ELEC-002", "Mechanical Keyboard", Decimal("399.90")),
    ("ELEC-003", "Gaming Mouse", Decimal("249.90")),
    ("ELEC-004", "Laptop 14\"", Decimal("3999.00")),
    ("ELEC-005", "Headset", Decimal("299.90")),
    ("FURN-001", "Office Desk", Decimal("899.00")),
    ("FURN-002", "Ergonomic Chair", Decimal("1499.00")),
    ("FURN-003", "Bookshelf", Decimal("699.00")),
    ("OFF-001", "A4 Paper", Decimal("29.90")),
    ("OFF-002", "Blue Pen", Decimal("4.90")),
    ("OFF-003", "Notebook", Decimal("19.90")),
    ("OFF-004", "Stapler", Decimal("39.90")),
]

# Where each seeded order ends up, walked along the state machine.
STATUS_PATHS = [
    [],
    [OrderStatus.CONFIRMED],
    [OrderStatus.CONFIRMED, OrderStatus.SHIPPED],
    [OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED],
    [OrderStatus.CANCELLED],
]


class Command(BaseCommand):
    help = "Seed a demo user with a product catalog and a few orders."

    def add_arguments(self, parser):
        parser.add_argument("--username", default="demo")
        parser.add_argument("--password", default="demo12345")
        parser.add_argument("--orders", type=int, default=10)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        owner = self._seed_user(options["username"], options["password"])
        products = self._seed_products(owner.pk)
        orders_created = self._seed_orders(owner.pk, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"user={owner.get_username()}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_user(self, username: str, password: str):
        User = get_user_model()
        user, created = User.objects.get_or_create(username=username)
        if created:
            user.set_password(password)
            user.save()
        return user

    def _seed_products(self, owner_id) -> list[Product]:
        self.stdout.write("Creating products...")
        service = ProductService(repository=ProductDjangoRepository())
        products: list[Product] = []
        for code, name, price in CATALOG:
            try:
                products.append(service.get_product_by_code(code, owner_id))
                continue
            except ProductNotFound:
                pass
            dto = CreateProductDTO(
                code=code,
                name=name,
                price=price,
                stock=random.randint(20, 200),
            )
            products.append(service.create_product(owner_id, dto))
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, owner_id, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = 0
        for _ in range(count):
            lines = random.sample(products, k=min(random.randint(1, 4), len(products)))
            dto = CreateOrderDTO(
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, 3))
                    for p in lines
                ]
            )
            try:
                with transaction.atomic():
                    order = service.create_order(owner_id, dto)
                    for status in random.choice(STATUS_PATHS):
                        order = service.update_status(order.id, owner_id, status)
            except DomainError as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order: {exc.message}"))
                continue
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
