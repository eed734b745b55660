from django.core.management.base import BaseCommand

from modules.products.repositories.mongo_repository import ProductMongoRepository


class Command(BaseCommand):
    help = "Create the MongoDB indexes used by the product list query."

    def handle(self, *args, **options):
        names = ProductMongoRepository().ensure_indexes()
        self.stdout.write(self.style.SUCCESS(f"Indexes ready: {', '.join(names)}"))
