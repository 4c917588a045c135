import logging
import random
import threading
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodcart.configuration.settings import Configuration
from foodcart.core.exceptions.app_exception import AppHttpException, app_http_exception_handler
from foodcart.database.connection import create_db_engine, init_db
from foodcart.functions.scheduler.scheduler import TransitionScheduler
from foodcart.models.cart.cart import Cart
from foodcart.services.order_history import OrderHistoryService
from foodcart.services.order_lifecycle import OrderLifecycleEngine
from foodcart.services.session_context import SessionContext
from foodcart.storage.history_store import OrderHistoryStore
from foodcart.storage.key_value_store import KeyValueStore

from foodcart.routes.session.session import SessionRouter
from foodcart.routes.cart.cart import CartRouter
from foodcart.routes.order.order import OrderRouter


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.scheduler.start()
    yield
    with app.state.pollers_lock:
        for poller in list(app.state.pollers.values()):
            poller.stop()
    app.state.scheduler.shutdown()


def create_app(
    configuration: Optional[Configuration] = None,
    scheduler: Optional[TransitionScheduler] = None,
    rng: Optional[random.Random] = None,
):
    """
    Creates the FastAPI application and wires the order lifecycle core into it.
    """
    configuration = configuration or Configuration()
    logging.info(f"SYSTEM >>> Environment loaded: {configuration.environment}")

    app = FastAPI(lifespan=lifespan)

    logging.info("SYSTEM >>> Initializing storage...")
    engine = create_db_engine(configuration)
    init_db(engine)

    store = OrderHistoryStore(KeyValueStore(engine), configuration.history_storage_key)
    store.load()

    scheduler = scheduler or TransitionScheduler(configuration.scheduler_timezone)
    session_context = SessionContext()

    app.state.configuration = configuration
    app.state.db_engine = engine
    app.state.store = store
    app.state.scheduler = scheduler
    app.state.session_context = session_context
    app.state.cart = Cart()
    app.state.history = OrderHistoryService(store)
    app.state.engine = OrderLifecycleEngine(
        store=store,
        session=session_context,
        scheduler=scheduler,
        settings=configuration.lifecycle,
        rng=rng,
    )
    app.state.pollers = {}
    app.state.pollers_lock = threading.Lock()

    origins = ["http://localhost:3000", "http://localhost:3001"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppHttpException, app_http_exception_handler)

    app.include_router(SessionRouter())
    app.include_router(CartRouter())
    app.include_router(OrderRouter())

    return app
