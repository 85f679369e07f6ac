from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.models import Product

SEED_NAMES = [
    "Keyboard",
    "Mouse",
    "Monitor 24in",
    "USB-C Hub",
    "Headset",
    "Webcam",
    "Laptop Stand",
    "Desk Lamp",
    "External SSD 1TB",
    "Microphone",
]


class Command(BaseCommand):
    help = "Seed the catalog with development products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--unavailable",
            type=int,
            default=2,
            help="How many seeded products to soft-delete.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding products...")

        products = self._seed_products()
        removed = 0
        for product in products[: options["unavailable"]]:
            if product.available:
                product.mark_unavailable()
                removed += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(products)}, unavailable={removed}"
            )
        )

    def _seed_products(self) -> list[Product]:
        products: list[Product] = []
        for name in SEED_NAMES:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "price": Decimal(random.randint(500, 50000)) / Decimal(100),
                },
            )
            products.append(product)
        return products
