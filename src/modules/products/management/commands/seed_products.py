from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.repositories.mongo_repository import ProductMongoRepository
from modules.products.services import ProductService

SEED_PRODUCTS = [
    ("Mechanical Keyboard", "Hot-swappable switches, aluminium frame.", "peripherals", "129.90"),
    ("Wireless Mouse", "Ergonomic mouse with USB-C charging.", "peripherals", "49.50"),
    ("27in Monitor", "QHD IPS panel, 144 Hz.", "displays", "329.00"),
    ("USB-C Dock", "Dual display dock with 100 W passthrough.", "accessories", "189.00"),
    ("Laptop Stand", "Adjustable aluminium stand.", "accessories", "39.90"),
    ("Noise Cancelling Headphones", "Over-ear, 30 h battery.", "audio", "249.00"),
]


class Command(BaseCommand):
    help = "Seed the product catalogue with development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Insert the sample products even if the catalogue is not empty.",
        )

    def handle(self, *args, **options):
        repository = ProductMongoRepository()
        service = ProductService(repository=repository)

        if service.has_products() and not options["force"]:
            self.stdout.write(
                self.style.WARNING("Catalogue already has products; use --force to seed anyway.")
            )
            return

        self.stdout.write("Seeding products...")
        created = 0
        for name, description, category, price in SEED_PRODUCTS:
            service.create_product(
                CreateProductDTO(
                    name=name,
                    description=description,
                    category=category,
                    price=Decimal(price),
                )
            )
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Seed completed: products={created}"))
