import enum


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_cancellable(self) -> bool:
        return self in (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"


class BookingType(str, enum.Enum):
    STUDENT_DIRECT = "student_direct"
    PARENT_CHILD = "parent_child"


class ModerationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CancelledBy(str, enum.Enum):
    STUDENT = "student"
    PARENT = "parent"
    PROFESSOR = "professor"
    ADMIN = "admin"


class RoleSlug(str, enum.Enum):
    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"
    PARENT = "parent"


def enum_values(enum_cls):
    """Store enum *values* ("pending"), not member names ("PENDING")."""
    return [member.value for member in enum_cls]
