from pydantic import BaseModel, ConfigDict

NOT_ASSIGNED_NAME = "Not Assigned"
NOT_ASSIGNED_CONTACT = "N/A"


class DeliveryPartner(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    contact: str

    @classmethod
    def not_assigned(cls) -> "DeliveryPartner":
        return cls(name=NOT_ASSIGNED_NAME, contact=NOT_ASSIGNED_CONTACT)
