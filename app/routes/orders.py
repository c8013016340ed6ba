"""Order routes backed by the FastSpring commerce API."""
from fastapi import APIRouter, Depends

from app.commerce.client import OrderGateway, get_order_gateway
from app.core.security import public
from app.schemas.order import OrderRead, OrderValidate
from app.stores.orders import OrderStore, get_order_store

router = APIRouter(tags=["orders"], dependencies=[Depends(public)])


@router.get("/orders")
async def list_orders(gateway: OrderGateway = Depends(get_order_gateway)):
    """
    Proxy the commerce API's order list.

    The upstream JSON is returned unchanged. Upstream failures return 502,
    and an upstream timeout returns 504.
    """
    return await gateway.fetch_orders()


@router.post("/order-validate", response_model=OrderRead)
def validate_order(data: OrderValidate, store: OrderStore = Depends(get_order_store)):
    """Record a purchase the first time its order id is seen; repeats get 409."""
    return store.validate(data.order_id)
