from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from config_catalog.products import PRIVACY_POLICY
from storefront.models.checkout import AddToCartRequest, CheckoutRequest, OrderStatusUpdate
from storefront.services.checkout import CheckoutOrchestrator, PaymentConfig
from storefront.state.catalog import get_product, list_products
from storefront.state.store import CartStore, SessionCarts
from config import settings
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session_id(x_session_id: str = Header(...)) -> str:
    return x_session_id


def get_carts(request: Request) -> SessionCarts:
    return request.app.state.carts


def get_order_store(request: Request):
    return request.app.state.order_store


def get_orchestrator(request: Request) -> CheckoutOrchestrator:
    wallet = getattr(request.app.state, "wallet", None)
    if wallet is None:
        logger.error("[Checkout] Wallet provider not configured (set WALLET_RPC_URL)")
        raise HTTPException(status_code=503, detail="Wallet payments not configured")
    return CheckoutOrchestrator(wallet, request.app.state.order_store, PaymentConfig.from_settings(settings))


def cart_payload(cart: CartStore) -> dict:
    return {
        "items": [item.model_dump() for item in cart.items],
        "total": cart.total,
        "count": len(cart),
    }


@router.get("/ping")
async def ping():
    return {"status": "ok", "store": settings.STORE_NAME}

@router.get("/products")
async def products():
    return [product.model_dump() for product in list_products()]

@router.get("/products/{product_id}")
async def product_detail(product_id: str):
    product = get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.model_dump()

@router.get("/privacy-policy")
async def privacy_policy():
    return {"store": settings.STORE_NAME, "sections": PRIVACY_POLICY}

@router.get("/cart")
async def view_cart(session_id: str = Depends(get_session_id), carts: SessionCarts = Depends(get_carts)):
    return cart_payload(carts.peek(session_id) or CartStore())

@router.post("/cart/items")
async def add_cart_item(
    payload: AddToCartRequest,
    session_id: str = Depends(get_session_id),
    carts: SessionCarts = Depends(get_carts),
):
    product = get_product(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    errors = {}
    if product.colors and payload.color not in product.colors:
        errors["color"] = f"Choose one of: {', '.join(product.colors)}"
    if product.sizes and payload.size not in product.sizes:
        errors["size"] = f"Choose one of: {', '.join(product.sizes)}"
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    cart = carts.get(session_id)
    added = cart.add_to_cart(product, payload.color, payload.size, payload.custom_message)
    return {"added": added, **cart_payload(cart)}

@router.delete("/cart/items/{product_id}")
async def remove_cart_item(
    product_id: str,
    session_id: str = Depends(get_session_id),
    carts: SessionCarts = Depends(get_carts),
):
    cart = carts.peek(session_id) or CartStore()
    cart.remove_from_cart(product_id)
    carts.discard_if_empty(session_id)
    return cart_payload(cart)

@router.delete("/cart")
async def clear_cart(session_id: str = Depends(get_session_id), carts: SessionCarts = Depends(get_carts)):
    carts.discard(session_id)
    return cart_payload(CartStore())

@router.post("/checkout")
async def checkout(
    payload: CheckoutRequest,
    session_id: str = Depends(get_session_id),
    carts: SessionCarts = Depends(get_carts),
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
):
    cart = carts.peek(session_id) or CartStore()
    logger.info(f"[Checkout] Checkout requested for {len(cart)} item(s), total {cart.total}")
    result = await orchestrator.checkout(
        cart,
        consent_accepted=payload.accepted_privacy,
        request_email=payload.request_email,
        request_address=payload.request_address,
    )

    if result.consent_required:
        content = result.model_dump()
        content["privacy_policy"] = PRIVACY_POLICY
        return JSONResponse(status_code=428, content=content)
    if not result.success:
        return JSONResponse(status_code=402, content=result.model_dump())

    carts.discard_if_empty(session_id)
    return JSONResponse(status_code=201, content=result.model_dump())

@router.get("/admin/orders")
async def admin_orders(order_store=Depends(get_order_store)):
    try:
        orders = await order_store.list_orders()
    except Exception as e:
        logger.error(f"[Admin] Fetching orders failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")
    return [order.model_dump(mode="json") for order in orders]

@router.get("/admin/orders/{order_id}")
async def admin_order_detail(order_id: str, order_store=Depends(get_order_store)):
    try:
        order = await order_store.get_order(order_id)
    except Exception as e:
        logger.error(f"[Admin] Fetching order {order_id} failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch order")
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order.model_dump(mode="json")

@router.patch("/admin/orders/{order_id}/status")
async def admin_update_order_status(order_id: str, payload: OrderStatusUpdate, order_store=Depends(get_order_store)):
    try:
        order = await order_store.update_order_status(order_id, payload.status)
    except Exception as e:
        logger.error(f"[Admin] Updating order {order_id} failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to update order")
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info(f"[Admin] Order {order_id} set to {payload.status.value}")
    return order.model_dump(mode="json")

@router.get("/admin/stats")
async def admin_stats(order_store=Depends(get_order_store)):
    try:
        return await order_store.order_statistics(total_products=len(list_products()))
    except Exception as e:
        logger.error(f"[Admin] Statistics query failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to load statistics")
