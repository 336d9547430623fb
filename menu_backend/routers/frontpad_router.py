# menu_backend/routers/frontpad_router.py
from fastapi import APIRouter, Depends, Request

from ..schemas import OrderRequest, OrderResponse, ProductsResponse, StopsResponse
from ..services.orders.frontpad_service import FrontpadService

router = APIRouter(prefix="/frontpad", tags=["Frontpad"])


def get_relay(request: Request) -> FrontpadService:
    return request.app.state.frontpad


@router.post("/send-order", response_model=OrderResponse)
async def send_order(body: OrderRequest, relay: FrontpadService = Depends(get_relay)):
    return await relay.send_order(body)


@router.get("/products", response_model=ProductsResponse)
async def get_products(relay: FrontpadService = Depends(get_relay)):
    return {"success": True, "products": await relay.get_products()}


@router.get("/stops", response_model=StopsResponse)
async def get_stops(relay: FrontpadService = Depends(get_relay)):
    return await relay.get_stops()
