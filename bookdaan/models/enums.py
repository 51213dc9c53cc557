"""Status and role values stored in string columns."""

import enum


class UserRole(str, enum.Enum):
    DONOR = "donor"
    RECIPIENT = "recipient"
    ADMIN = "admin"


class BookCondition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class BookStatus(str, enum.Enum):
    """
    Availability of a listed book.

    available -> requested (request created or accepted)
    requested -> donated (request completed)
    requested -> available (request rejected)
    """
    AVAILABLE = "available"
    REQUESTED = "requested"
    DONATED = "donated"


class RequestStatus(str, enum.Enum):
    """
    Status of a recipient's request for a book.

    pending -> accepted | rejected | completed
    accepted -> completed
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class NotificationType(str, enum.Enum):
    BOOK_REQUEST = "book_request"
    REQUEST_UPDATE = "request_update"
    ANNOUNCEMENT = "announcement"
