import logging
from typing import Dict, Iterable, List, Optional

from storefront.models.checkout import CartItem, Product

logger = logging.getLogger(__name__)


class CartStore:
    """In-memory cart for one browsing session.

    Holds at most one line item per product id. Every holder of the same
    store sees mutations immediately; nothing is persisted.
    """

    def __init__(self, initial_items: Optional[Iterable[CartItem]] = None):
        self._items: List[CartItem] = []
        for item in initial_items or []:
            if item.product_id not in self:
                self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: object) -> bool:
        return any(item.product_id == product_id for item in self._items)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum(item.price for item in self._items)

    def add_to_cart(self, product: Product, color: str, size: str, custom_message: Optional[str] = None) -> bool:
        """Add a product variant; returns False if the product is already in the cart."""
        if product.id in self:
            logger.info(f"[Cart] Product {product.id} already in cart, keeping existing entry")
            return False

        self._items.append(CartItem(
            product_id=product.id,
            name=product.name,
            price=product.price,
            color=color,
            size=size,
            custom_message=custom_message,
        ))
        logger.info(f"[Cart] Added product {product.id} ({color}/{size})")
        return True

    def remove_from_cart(self, product_id: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.product_id != product_id]
        return len(self._items) != before

    def clear_cart(self):
        self._items = []


class SessionCarts:
    """Carts keyed by browsing session id.

    A cart exists only while it holds items; reading or emptying a cart never
    leaves an entry behind.
    """

    def __init__(self):
        self._carts: Dict[str, CartStore] = {}

    def get(self, session_id: str) -> CartStore:
        if session_id not in self._carts:
            self._carts[session_id] = CartStore()
        return self._carts[session_id]

    def peek(self, session_id: str) -> Optional[CartStore]:
        return self._carts.get(session_id)

    def discard(self, session_id: str):
        self._carts.pop(session_id, None)

    def discard_if_empty(self, session_id: str):
        cart = self._carts.get(session_id)
        if cart is not None and not len(cart):
            del self._carts[session_id]

    def __len__(self) -> int:
        return len(self._carts)
