from enum import Enum


class StatusEnum(Enum):
    PAID = "paid"
    REFUNDED = "refunded"
