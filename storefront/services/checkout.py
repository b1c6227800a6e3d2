import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from storefront.models.checkout import NO_ADDRESS, NO_EMAIL, UNKNOWN_CUSTOMER, Order, OrderStatus, PaymentResult
from storefront.services.wallet import (
    SEND_CALLS_METHOD,
    WalletProvider,
    WalletProviderError,
    build_data_request,
    build_transfer_request,
    format_address,
    format_name,
)
from storefront.state.store import CartStore

logger = logging.getLogger(__name__)

CONSENT_REQUIRED_MESSAGE = "Please accept the privacy policy and data usage terms before paying"
EMPTY_CART_MESSAGE = "Your cart is empty"
TRANSACTION_FAILED_MESSAGE = "Transaction failed"
NO_HASH_MESSAGE = "Payment transaction failed - no transaction hash received"


class PaymentError(Exception):
    """Raised when the funds transfer does not yield a transaction reference"""


class OrderStore(Protocol):
    async def create_order(self, order: Order) -> Order:
        ...


@dataclass(frozen=True)
class PaymentConfig:
    chain_id: int
    token_address: str
    token_decimals: int
    recipient: str
    callback_url: str

    @classmethod
    def from_settings(cls, settings) -> "PaymentConfig":
        return cls(
            chain_id=settings.PAYMENT_CHAIN_ID,
            token_address=settings.PAYMENT_TOKEN_ADDRESS,
            token_decimals=settings.PAYMENT_TOKEN_DECIMALS,
            recipient=settings.PAYMENT_RECIPIENT,
            callback_url=settings.DATA_CALLBACK_URL,
        )


def extract_contact_fields(user_data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Normalize the wallet's dataCallback payload into email/address/name."""
    fields: Dict[str, str] = {}
    if not isinstance(user_data, dict):
        return fields

    email = user_data.get("email")
    if email and isinstance(email, str):
        fields["email"] = email

    physical_address = user_data.get("physicalAddress")
    if physical_address and isinstance(physical_address, dict):
        address = format_address(physical_address)
        if address:
            fields["address"] = address
        if isinstance(physical_address.get("name"), dict):
            name = format_name(physical_address["name"])
            if name:
                fields["name"] = name

    return fields


class CheckoutOrchestrator:
    """Runs one checkout attempt: consent gate, transfer, data collection, order.

    The sequence is strict and never resumed. Any failure after the consent
    gate yields a failed PaymentResult, creates no order and keeps the cart.
    On success only the items that were paid for leave the cart.
    """

    def __init__(self, wallet: WalletProvider, order_store: OrderStore, config: PaymentConfig):
        self.wallet = wallet
        self.order_store = order_store
        self.config = config

    async def checkout(
        self,
        cart: CartStore,
        consent_accepted: bool,
        request_email: bool = True,
        request_address: bool = True,
    ) -> PaymentResult:
        if not consent_accepted:
            logger.info("[Checkout] Privacy policy not accepted, showing disclosure")
            return PaymentResult(success=False, consent_required=True, error=CONSENT_REQUIRED_MESSAGE)

        if not len(cart):
            logger.warning("[Checkout] Refusing to check out an empty cart")
            return PaymentResult(success=False, error=EMPTY_CART_MESSAGE)

        items = cart.items
        total = cart.total
        transaction_hash = None

        try:
            transaction_hash = await self._transfer(total)
            user_data = await self._collect_data(request_email, request_address)
            contact = extract_contact_fields(user_data)

            order = Order(
                customer_name=contact.get("name") or UNKNOWN_CUSTOMER,
                customer_email=contact.get("email") or NO_EMAIL,
                customer_address=contact.get("address") or NO_ADDRESS,
                items=items,
                total=total,
                status=OrderStatus.PENDING,
                payment_id=transaction_hash,
            )
            order = await self.order_store.create_order(order)
        except Exception as e:
            if transaction_hash:
                # Funds already moved but no order exists; needs manual reconciliation
                logger.error(
                    f"[Checkout] Transfer {transaction_hash} succeeded but no order was created: {str(e)}"
                )
            else:
                logger.error(f"[Checkout] Payment error: {str(e)}")
            if isinstance(e, (PaymentError, WalletProviderError)):
                return PaymentResult(success=False, error=str(e) or TRANSACTION_FAILED_MESSAGE)
            return PaymentResult(success=False, error=TRANSACTION_FAILED_MESSAGE)

        # Items added while the payment was pending stay in the cart
        for item in items:
            cart.remove_from_cart(item.product_id)
        logger.info(f"[Checkout] Order {order.id} created for transaction {transaction_hash} ({total} USDC)")

        return PaymentResult(
            success=True,
            order_id=order.id,
            transaction_hash=transaction_hash,
            **contact,
        )

    async def _transfer(self, total: float) -> str:
        params = build_transfer_request(
            total,
            chain_id=self.config.chain_id,
            token_address=self.config.token_address,
            recipient=self.config.recipient,
            decimals=self.config.token_decimals,
        )
        logger.info(f"[Checkout] Requesting transfer of {total} USDC to {self.config.recipient}")
        response = await self.wallet.request(SEND_CALLS_METHOD, params)

        transaction_hash = response.get("hash") if isinstance(response, dict) else None
        if not transaction_hash:
            raise PaymentError(NO_HASH_MESSAGE)

        logger.info(f"[Checkout] Transfer confirmed with hash {transaction_hash}")
        return transaction_hash

    async def _collect_data(self, request_email: bool, request_address: bool) -> Optional[Dict[str, Any]]:
        params = build_data_request(
            request_email,
            request_address,
            chain_id=self.config.chain_id,
            callback_url=self.config.callback_url,
        )
        if params is None:
            logger.info("[Checkout] No profile data requested, skipping data collection")
            return None

        response = await self.wallet.request(SEND_CALLS_METHOD, params)
        capabilities = response.get("capabilities") if isinstance(response, dict) else None
        if not isinstance(capabilities, dict):
            return None
        return capabilities.get("dataCallback")
