from foodcart.models.order.delivery_partner import DeliveryPartner

# Delivery partners randomly assigned to new orders
DELIVERY_PARTNERS = [
    {"id": 1, "name": "Veera Sangoli", "contact": "+91-9878-76-8765"},
    {"id": 2, "name": "Samarth Uphadhyaya", "contact": "+91-998-987-6543"},
    {"id": 3, "name": "Manikanta Veraga", "contact": "+91-879-456-7890"},
    {"id": 4, "name": "Ketan Kulkarni", "contact": "+91-687-897-7880"},
]


def delivery_partner_roster() -> list[DeliveryPartner]:
    return [DeliveryPartner(name=p["name"], contact=p["contact"]) for p in DELIVERY_PARTNERS]
