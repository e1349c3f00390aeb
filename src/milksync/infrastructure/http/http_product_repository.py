"""REST-backed implementation of ProductRepository."""

from __future__ import annotations

from urllib.parse import quote

from milksync.domain.exceptions import DataShapeError
from milksync.domain.model.product import Product
from milksync.domain.repository.product_repository import ProductRepository
from milksync.infrastructure.http import codec
from milksync.infrastructure.http.api_client import ApiClient


class HttpProductRepository(ProductRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def list_by_company(self, company_name: str) -> list[Product]:
        raw = self._client.get(f"/products/company/{quote(company_name, safe='')}")
        if not isinstance(raw, list):
            raise DataShapeError(f"Expected a list of products, got {type(raw).__name__}")
        return [codec.decode_product(p) for p in raw]
