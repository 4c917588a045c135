from fastapi import Request, status

from foodcart.core.exceptions.app_exception import AppHttpException
from foodcart.models.cart.cart import Cart
from foodcart.services.order_history import OrderHistoryService
from foodcart.services.order_lifecycle import OrderLifecycleEngine
from foodcart.services.session_context import SessionContext


def get_cart(request: Request) -> Cart:
    return request.app.state.cart

def get_session_context(request: Request) -> SessionContext:
    return request.app.state.session_context

def get_engine(request: Request) -> OrderLifecycleEngine:
    return request.app.state.engine

def get_history(request: Request) -> OrderHistoryService:
    return request.app.state.history

def get_current_account(request: Request) -> str:
    account = get_session_context(request).current_account
    if account is None:
        raise AppHttpException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No account signed in",
            solution="Sign in through POST /session/ first",
        )
    return account
