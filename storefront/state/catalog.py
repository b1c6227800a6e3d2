from typing import List, Optional

from config_catalog.products import PRODUCTS
from storefront.models.checkout import Product

catalog: List[Product] = [Product(**data) for data in PRODUCTS]


def list_products() -> List[Product]:
    return list(catalog)


def get_product(product_id: str) -> Optional[Product]:
    for product in catalog:
        if product.id == product_id:
            return product
    return None
