import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from foodcart.configuration.settings import LifecycleSettings
from foodcart.data.delivery_partners import delivery_partner_roster
from foodcart.enums.delivery_status import DeliveryStatus
from foodcart.enums.final_outcome import FinalOutcome
from foodcart.functions.scheduler.scheduler import TransitionScheduler
from foodcart.models.cart.cart import Cart
from foodcart.models.order.delivery_partner import DeliveryPartner
from foodcart.models.order.order import Order
from foodcart.services.session_context import SessionContext
from foodcart.storage.history_store import OrderHistoryStore


@dataclass(frozen=True)
class ScheduledTransition:
    order_id: str
    status: DeliveryStatus
    delay: float

    @property
    def job_id(self) -> str:
        return f"{self.order_id}:{self.status.name}"


@dataclass(frozen=True)
class StatusProgression:
    """Every status change planned for one order at submission time."""

    order_id: str
    outcome: FinalOutcome
    transitions: Tuple[ScheduledTransition, ...]

    @property
    def final_status(self) -> Optional[DeliveryStatus]:
        if self.outcome == FinalOutcome.CANCEL:
            return DeliveryStatus.CANCELLED
        if self.outcome == FinalOutcome.DELIVER:
            return DeliveryStatus.DELIVERED
        return None


def draw_outcome(rng: random.Random, settings: LifecycleSettings) -> FinalOutcome:
    roll = rng.random()
    if roll < settings.cancel_probability:
        return FinalOutcome.CANCEL
    if roll < settings.cancel_probability + settings.stall_probability:
        return FinalOutcome.STALL
    return FinalOutcome.DELIVER


def plan_progression(order_id: str, outcome: FinalOutcome, settings: LifecycleSettings) -> StatusProgression:
    transitions: List[ScheduledTransition] = [
        ScheduledTransition(order_id, DeliveryStatus.IN_PROGRESS, settings.short_delay),
        ScheduledTransition(order_id, DeliveryStatus.OUT_FOR_DELIVERY, settings.medium_delay),
    ]
    if outcome == FinalOutcome.CANCEL:
        transitions.append(ScheduledTransition(order_id, DeliveryStatus.CANCELLED, settings.cancel_delay))
    elif outcome == FinalOutcome.DELIVER:
        transitions.append(ScheduledTransition(order_id, DeliveryStatus.DELIVERED, settings.deliver_delay))
    return StatusProgression(order_id=order_id, outcome=outcome, transitions=tuple(transitions))


class OrderLifecycleEngine:
    """Turns carts into orders and walks them through the delivery statuses.

    Status changes are timed jobs on the scheduler. A job re-reads the order
    when it fires and does nothing once the order is cancelled, so
    cancellation never gets overwritten whatever order the jobs fire in.
    """

    def __init__(
        self,
        store: OrderHistoryStore,
        session: SessionContext,
        scheduler: TransitionScheduler,
        settings: Optional[LifecycleSettings] = None,
        partners: Optional[Sequence[DeliveryPartner]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.session = session
        self.scheduler = scheduler
        self.settings = settings or LifecycleSettings()
        self.partners = list(partners) if partners is not None else delivery_partner_roster()
        self.rng = rng or random.Random()

        if not self.partners:
            raise ValueError("At least one delivery partner is required")

    def submit(self, cart: Cart, notes: Optional[str] = None, account_id: Optional[str] = None) -> Optional[Order]:
        account = account_id if account_id is not None else self.session.current_account
        if account is None:
            logging.info("ORDER >>> No account signed in, order not recorded")
            return None

        lines, total = cart.snapshot()
        if not lines:
            logging.info(f"ORDER >>> Empty cart for account {account}, nothing to submit")
            return None

        partner = self.rng.choice(self.partners)
        order = Order(
            line_items=lines,
            total=total,
            notes=notes or "",
            delivery_status=DeliveryStatus.PENDING,
            delivery_partner=partner,
        )
        if self.store.append(account, order) is None:
            logging.error(f"ORDER >>> Order {order.short_id} could not be saved for account {account}")
            return None

        logging.info(
            f"ORDER >>> Order {order.short_id} placed by account {account}: "
            f"{len(lines)} lines, total {total:.2f}, partner {partner.name}"
        )

        self.schedule_progression(order.order_id)
        return order

    def schedule_progression(self, order_id: str) -> StatusProgression:
        # The outcome is drawn here, once per order
        outcome = draw_outcome(self.rng, self.settings)
        progression = plan_progression(order_id, outcome, self.settings)

        for transition in progression.transitions:
            self.scheduler.schedule(
                transition.delay,
                self.apply_transition,
                args=(transition.order_id, transition.status),
                job_id=transition.job_id,
            )

        final_status = progression.final_status
        logging.info(
            f"ORDER >>> Order {order_id[:8]} scheduled with outcome {outcome.value}, "
            f"ending {final_status.value if final_status else 'Out for Delivery (stalled)'}"
        )
        return progression

    def apply_transition(self, order_id: str, status: DeliveryStatus) -> Optional[Order]:
        account = self.session.current_account
        if account is None:
            logging.info(f"ORDER >>> No account signed in, dropping {status.value} for order {order_id[:8]}")
            return None

        current = self.store.find(account, order_id)
        if current is None:
            return None

        if current.delivery_status == DeliveryStatus.CANCELLED:
            logging.info(f"ORDER >>> Order {current.short_id} was cancelled, skipping {status.value}")
            return None

        return self.update_delivery_status(order_id, status)

    def update_delivery_status(self, order_id: str, status: DeliveryStatus) -> Optional[Order]:
        account = self.session.current_account
        if account is None:
            return None

        updated = self.store.update_status(account, order_id, status)
        if updated is not None:
            logging.info(f"ORDER >>> Order {updated.short_id} is now {updated.delivery_status.value}")
        return updated

    def cancel_order(self, order_id: str) -> Optional[Order]:
        cancelled = self.update_delivery_status(order_id, DeliveryStatus.CANCELLED)
        if cancelled is not None and cancelled.delivery_status == DeliveryStatus.CANCELLED:
            self.scheduler.cancel_order(order_id)
        return cancelled
