from foodcart.helpers.order.formatters import format_currency, format_order_date
from foodcart.models.order.order import Order

RECEIPT_WIDTH = 32


def render_receipt(order: Order) -> str:
    lines = []
    lines.append("=" * RECEIPT_WIDTH)
    lines.append(f"{'ORDER #' + order.short_id:^{RECEIPT_WIDTH}}")
    lines.append("=" * RECEIPT_WIDTH)
    lines.append(f"Date: {format_order_date(order.created_at)}")
    lines.append(f"Status: {order.delivery_status.value}")
    lines.append(f"Delivery partner: {order.delivery_partner.name}")
    lines.append(f"Contact: {order.delivery_partner.contact}")
    lines.append("-" * RECEIPT_WIDTH)

    for item in order.line_items:
        label = f"{item.name} x {item.quantity}"
        price = format_currency(item.subtotal)
        lines.append(f"{label[:RECEIPT_WIDTH - len(price) - 1]:<{RECEIPT_WIDTH - len(price)}}{price}")

    lines.append("-" * RECEIPT_WIDTH)
    total = format_currency(order.total)
    lines.append(f"{'Total':<{RECEIPT_WIDTH - len(total)}}{total}")

    if order.notes:
        lines.append(f"Notes: {order.notes}")

    lines.append("=" * RECEIPT_WIDTH)
    return "\n".join(lines)
