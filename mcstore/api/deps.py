# mcstore/api/deps.py
from functools import lru_cache

from fastapi import Depends, HTTPException

from mcstore.domain.errors import ConflictError, NotFoundError, StoreError, ValidationError
from mcstore.services.cart_service import STRATEGY_LOCKED, CartService
from mcstore.services.customer_service import CustomerService
from mcstore.services.lock_service import LockService
from mcstore.services.notification_service import NotificationService
from mcstore.services.order_service import OrderService
from mcstore.services.payment_service import PaymentService
from mcstore.services.product_service import ProductService
from mcstore.services.rest_gateway import BackendConfig, RestGateway
from mcstore.services.review_service import ReviewService
from mcstore.services.shipping_service import ShippingService
from mcstore.services.stock_service import StockAdjustmentQueue, StockService
from mcstore.services.wishlist_service import WishlistService
from mcstore.utils import settings


@lru_cache
def get_gateway() -> RestGateway:
    return RestGateway(BackendConfig.from_settings())


@lru_cache
def get_lock_service() -> LockService | None:
    if settings.CART_UPSERT_STRATEGY != STRATEGY_LOCKED:
        return None
    return LockService()


@lru_cache
def get_stock_queue() -> StockAdjustmentQueue:
    return StockAdjustmentQueue()


@lru_cache
def get_shipping_service() -> ShippingService:
    return ShippingService()


@lru_cache
def get_payment_service() -> PaymentService:
    # handlery callbackow trzymane w instancji, wiec jedna na proces
    return PaymentService()


def get_product_service(gateway: RestGateway = Depends(get_gateway)) -> ProductService:
    return ProductService(gateway)


def get_cart_service(
    gateway: RestGateway = Depends(get_gateway),
    lock_service: LockService | None = Depends(get_lock_service),
) -> CartService:
    return CartService(gateway, lock_service=lock_service)


def get_wishlist_service(
    gateway: RestGateway = Depends(get_gateway),
    cart_service: CartService = Depends(get_cart_service),
) -> WishlistService:
    return WishlistService(gateway, cart_service)


def get_order_service(
    gateway: RestGateway = Depends(get_gateway),
    cart_service: CartService = Depends(get_cart_service),
    queue: StockAdjustmentQueue = Depends(get_stock_queue),
) -> OrderService:
    return OrderService(gateway, cart_service, StockService(gateway, queue))


def get_review_service(gateway: RestGateway = Depends(get_gateway)) -> ReviewService:
    return ReviewService(gateway)


def get_customer_service(gateway: RestGateway = Depends(get_gateway)) -> CustomerService:
    return CustomerService(gateway)


def get_notification_service(gateway: RestGateway = Depends(get_gateway)) -> NotificationService:
    return NotificationService(gateway)


def http_error(e: StoreError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.message)
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=e.message)
    return HTTPException(status_code=502, detail=e.message)
