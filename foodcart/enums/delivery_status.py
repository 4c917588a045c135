from enum import Enum

# Pending -> In Progress -> Out for Delivery -> Delivered | Cancelled
class DeliveryStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED)


# Progress bar percentage shown while tracking an order
DELIVERY_PROGRESS = {
    DeliveryStatus.PENDING: 25,
    DeliveryStatus.IN_PROGRESS: 50,
    DeliveryStatus.OUT_FOR_DELIVERY: 75,
    DeliveryStatus.DELIVERED: 100,
    DeliveryStatus.CANCELLED: 0,
}
