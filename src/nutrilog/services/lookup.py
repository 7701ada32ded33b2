"""Food lookups against the product and food databases."""

import logging
from dataclasses import dataclass

from nutrilog.adapters.fdc_client import FdcClient
from nutrilog.adapters.off_client import OpenFoodFactsClient
from nutrilog.domain.nutrition import NutritionRecord
from nutrilog.domain.sources import BrandedFood, ProductPayload
from nutrilog.services.cache import Cache
from nutrilog.services.extraction import barcode_candidates, extract

MIN_QUERY_LENGTH = 3

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Resolves barcodes and search queries into base nutrition records."""

    product_client: OpenFoodFactsClient
    fdc_client: FdcClient
    cache: Cache
    lookup_ttl_seconds: int = 86400
    search_ttl_seconds: int = 3600
    debug: bool = False

    async def lookup_barcode(self, barcode: str) -> NutritionRecord | None:
        """Return the base record for a scanned barcode, or None if unknown."""
        candidates = barcode_candidates(barcode)
        if not candidates:
            return None
        cache_key = f"off:barcode:{candidates[0]}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionRecord):
            return cached

        for candidate in candidates:
            product = await self.product_client.get_product(candidate)
            if product is None:
                continue
            record = extract(ProductPayload(product))
            self.cache.set(cache_key, record, ttl_seconds=self.lookup_ttl_seconds)
            if self.debug:
                _logger.info("Barcode %s matched as %s", barcode, candidate)
            return record

        if self.debug:
            _logger.info("Barcode %s not found (tried %s)", barcode, candidates)
        return None

    async def search_products(
        self, query: str, limit: int = 20
    ) -> list[NutritionRecord]:
        """Search the open product database."""
        cleaned = query.strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"off:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self.product_client.search_products(cleaned, page_size=limit)
        products = payload.get("products")
        records = [
            extract(ProductPayload(product))
            for product in (products if isinstance(products, list) else [])
            if isinstance(product, dict)
        ]
        self.cache.set(cache_key, records, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Product search: query=%s results=%s", cleaned, len(records))
        return records

    async def search_foods(self, query: str, limit: int = 50) -> list[NutritionRecord]:
        """Search the government food database."""
        cleaned = query.strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"fdc:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self.fdc_client.search_foods(cleaned, page_size=limit)
        foods = payload.get("foods")
        records = [
            extract(BrandedFood(food))
            for food in (foods if isinstance(foods, list) else [])
            if isinstance(food, dict)
        ]
        self.cache.set(cache_key, records, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("Food search: query=%s results=%s", cleaned, len(records))
        return records

    async def get_food(self, fdc_id: int) -> NutritionRecord | None:
        """Return the base record for a government food database id."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionRecord):
            return cached

        payload = await self.fdc_client.get_food(fdc_id)
        if payload is None:
            return None
        record = extract(BrandedFood(payload))
        self.cache.set(cache_key, record, ttl_seconds=self.lookup_ttl_seconds)
        return record
