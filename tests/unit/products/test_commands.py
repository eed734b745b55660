from __future__ import annotations

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command

from modules.products.management.commands.seed_products import SEED_PRODUCTS

pytestmark = pytest.mark.unit

SEED_MODULE = "modules.products.management.commands.seed_products"
INDEX_MODULE = "modules.products.management.commands.ensure_product_indexes"


@pytest.fixture()
def repo():
    repository = MagicMock()
    repository.exists.return_value = False
    repository.save.side_effect = lambda product: product
    return repository


class TestSeedProducts:
    def test_seeds_empty_catalogue(self, repo):
        out = StringIO()
        with patch(f"{SEED_MODULE}.ProductMongoRepository", return_value=repo):
            call_command("seed_products", stdout=out)

        repo.list.assert_not_called()
        assert repo.save.call_count == len(SEED_PRODUCTS)
        assert f"products={len(SEED_PRODUCTS)}" in out.getvalue()

    def test_skips_when_catalogue_has_products(self, repo):
        repo.exists.return_value = True
        out = StringIO()
        with patch(f"{SEED_MODULE}.ProductMongoRepository", return_value=repo):
            call_command("seed_products", stdout=out)

        repo.save.assert_not_called()
        assert "--force" in out.getvalue()

    def test_force_seeds_anyway(self, repo):
        repo.exists.return_value = True
        with patch(f"{SEED_MODULE}.ProductMongoRepository", return_value=repo):
            call_command("seed_products", "--force", stdout=StringIO())

        assert repo.save.call_count == len(SEED_PRODUCTS)


class TestEnsureProductIndexes:
    def test_reports_index_names(self):
        repo = MagicMock()
        repo.ensure_indexes.return_value = ["products_created_at_desc", "products_category"]
        out = StringIO()
        with patch(f"{INDEX_MODULE}.ProductMongoRepository", return_value=repo):
            call_command("ensure_product_indexes", stdout=out)

        assert "products_created_at_desc, products_category" in out.getvalue()
