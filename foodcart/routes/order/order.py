import logging
from typing import List
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse

from foodcart.core.exceptions.app_exception import AppHttpException
from foodcart.enums.delivery_status import DELIVERY_PROGRESS
from foodcart.functions.order.status_poller import OrderStatusPoller
from foodcart.helpers.order.receipt import render_receipt
from foodcart.models.cart.cart import Cart
from foodcart.models.order.order import Order
from foodcart.routes.dependencies import get_cart, get_current_account, get_engine, get_history, get_session_context
from foodcart.schemas.order import OrderCreate, OrderTracking, StatusUpdateRequest
from foodcart.services.order_history import OrderHistoryService
from foodcart.services.order_lifecycle import OrderLifecycleEngine
from foodcart.services.session_context import SessionContext


def start_tracking(request: Request, account_id: str) -> OrderStatusPoller:
    """Replace the account's status poller with one following its latest order."""
    state = request.app.state
    with state.pollers_lock:
        previous = state.pollers.get(account_id)
        if previous is not None:
            previous.stop()

        poller = OrderStatusPoller(
            history=state.history,
            scheduler=state.scheduler,
            account_id=account_id,
            interval=state.configuration.poll_interval_seconds,
            on_update=lambda order: logging.info(
                f"POLLING >>> Order {order.short_id} status: {order.delivery_status.value}"
            ),
        )
        state.pollers[account_id] = poller
        poller.start()
    return poller


def find_order_or_404(history: OrderHistoryService, account_id: str, order_id: str) -> Order:
    order = history.get_order(account_id, order_id)
    if not order:
        raise AppHttpException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


class OrderRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.add_api_route("/orders/", self.submit_order, methods=["POST"], response_model=Order)
        self.add_api_route("/orders/", self.list_orders, methods=["GET"], response_model=List[Order])
        self.add_api_route("/orders/latest", self.latest_order, methods=["GET"], response_model=Order)
        self.add_api_route("/orders/tracking", self.tracking, methods=["GET"], response_model=OrderTracking)
        self.add_api_route("/orders/{order_id}/progress", self.order_progress, methods=["GET"], response_model=dict)
        self.add_api_route("/orders/{order_id}/status", self.update_order_status, methods=["PATCH"], response_model=Order)
        self.add_api_route("/orders/{order_id}/cancel", self.cancel_order, methods=["POST"], response_model=Order)
        self.add_api_route("/orders/{order_id}/print", self.print_order, methods=["GET"], response_class=PlainTextResponse)

    def submit_order(
        self,
        request: Request,
        order_request: OrderCreate,
        account_id: str = Depends(get_current_account),
        cart: Cart = Depends(get_cart),
        engine: OrderLifecycleEngine = Depends(get_engine),
    ):
        if cart.is_empty():
            raise AppHttpException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
                solution="Add at least one item before submitting",
            )

        order = engine.submit(cart, order_request.notes, account_id=account_id)
        if order is None:
            raise AppHttpException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Order could not be saved",
                solution="Try again in a moment, the cart was kept",
            )

        cart.clear()
        start_tracking(request, account_id)
        return order

    def list_orders(
        self,
        session: SessionContext = Depends(get_session_context),
        history: OrderHistoryService = Depends(get_history),
    ):
        return history.get_history(session.current_account)

    def latest_order(
        self,
        session: SessionContext = Depends(get_session_context),
        history: OrderHistoryService = Depends(get_history),
    ):
        order = history.get_latest(session.current_account)
        if not order:
            raise AppHttpException(status_code=status.HTTP_404_NOT_FOUND, detail="No orders yet")
        return order

    def tracking(
        self,
        request: Request,
        account_id: str = Depends(get_current_account),
        history: OrderHistoryService = Depends(get_history),
    ):
        poller = request.app.state.pollers.get(account_id)
        if poller is None:
            latest = history.get_latest(account_id)
            progress = DELIVERY_PROGRESS[latest.delivery_status] if latest else 0
            return OrderTracking(order=latest, progress=progress, polling=False)
        return OrderTracking(order=poller.latest, progress=poller.progress, polling=poller.running)

    def order_progress(
        self,
        order_id: str,
        account_id: str = Depends(get_current_account),
        history: OrderHistoryService = Depends(get_history),
    ):
        order = find_order_or_404(history, account_id, order_id)
        return {"status": order.delivery_status.value, "progress": DELIVERY_PROGRESS[order.delivery_status]}

    def update_order_status(
        self,
        order_id: str,
        status_data: StatusUpdateRequest,
        account_id: str = Depends(get_current_account),
        engine: OrderLifecycleEngine = Depends(get_engine),
        history: OrderHistoryService = Depends(get_history),
    ):
        order = find_order_or_404(history, account_id, order_id)
        updated = engine.update_delivery_status(order_id, status_data.status)
        if updated is None:
            raise AppHttpException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Order is already {order.delivery_status.value}",
            )
        return updated

    def cancel_order(
        self,
        order_id: str,
        account_id: str = Depends(get_current_account),
        engine: OrderLifecycleEngine = Depends(get_engine),
        history: OrderHistoryService = Depends(get_history),
    ):
        order = find_order_or_404(history, account_id, order_id)
        cancelled = engine.cancel_order(order_id)
        if cancelled is None:
            raise AppHttpException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Order is already {order.delivery_status.value}",
            )
        return cancelled

    def print_order(
        self,
        order_id: str,
        account_id: str = Depends(get_current_account),
        history: OrderHistoryService = Depends(get_history),
    ):
        order = find_order_or_404(history, account_id, order_id)
        return render_receipt(order)
