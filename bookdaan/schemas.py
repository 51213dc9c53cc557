"""
Request and response bodies for the API.

Fields are snake_case in Python and camelCase on the wire
(e.g. ``donor_id`` <-> ``donorId``); request bodies accept both spellings.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from bookdaan.models.enums import BookCondition, RequestStatus, UserRole

MAX_MESSAGE_LENGTH = 1000
MIN_RATING = 1
MAX_RATING = 5
UPDATABLE_REQUEST_STATUSES = {
    RequestStatus.ACCEPTED.value,
    RequestStatus.REJECTED.value,
    RequestStatus.COMPLETED.value,
}


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized or '@' not in normalized:
        raise ValueError('A valid email is required.')
    return normalized


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


# ----------------------
# Users
# ----------------------

class LoginRequest(CamelModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str = UserRole.RECIPIENT.value

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {UserRole.DONOR.value, UserRole.RECIPIENT.value}:
            raise ValueError('Role must be donor or recipient.')
        return normalized


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    role: str
    phone: str | None = None
    address: str | None = None
    preferences: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator('preferences', mode='before')
    @classmethod
    def default_preferences(cls, value):
        return value or []


class DonorSummary(CamelModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class UpdateProfileRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    preferences: list[str] | None = None

    @field_validator('preferences')
    @classmethod
    def normalize_preferences(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        normalized: list[str] = []
        for preference in value:
            cleaned = preference.strip()
            if cleaned and cleaned not in normalized:
                normalized.append(cleaned)
        return normalized


# ----------------------
# Books
# ----------------------

class CreateBookRequest(CamelModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    isbn: str | None = None
    category: str = Field(min_length=1)
    language: str = 'English'
    condition: BookCondition
    cover_image_url: str | None = None
    description: str | None = None

    @field_validator('title', 'author', 'category', 'language')
    @classmethod
    def strip_required(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Field must not be blank.')
        return normalized

    @field_validator('isbn', 'cover_image_url', 'description')
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class UpdateBookRequest(CamelModel):
    title: str | None = None
    author: str | None = None
    isbn: str | None = None
    category: str | None = None
    language: str | None = None
    condition: BookCondition | None = None
    cover_image_url: str | None = None
    description: str | None = None

    @field_validator('title', 'author', 'category', 'language')
    @classmethod
    def reject_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            raise ValueError('Field must not be blank.')
        return normalized


class BookResponse(CamelModel):
    id: int
    title: str
    author: str
    isbn: str | None = None
    category: str
    language: str
    condition: str
    cover_image_url: str | None = None
    description: str | None = None
    donor_id: int
    status: str
    created_at: datetime | None = None


class BookDetailResponse(BookResponse):
    donor: DonorSummary | None = None


class BookListResponse(BaseModel):
    books: list[BookResponse]
    total: int


# ----------------------
# Requests
# ----------------------

class CreateBookRequestBody(CamelModel):
    book_id: int
    message: str | None = Field(default=None, max_length=MAX_MESSAGE_LENGTH)
    pickup_location: str | None = None

    @field_validator('message', 'pickup_location')
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class UpdateRequestStatusBody(CamelModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in UPDATABLE_REQUEST_STATUSES:
            raise ValueError('Invalid status')
        return normalized


class BookRequestResponse(CamelModel):
    id: int
    book_id: int
    recipient_id: int
    message: str | None = None
    status: str
    pickup_location: str | None = None
    created_at: datetime | None = None


# ----------------------
# Notifications & feedback
# ----------------------

class CreateNotificationRequest(CamelModel):
    user_id: int
    message: str = Field(min_length=1, max_length=MAX_MESSAGE_LENGTH)


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    type: str
    message: str
    is_read: bool
    created_at: datetime | None = None


class CreateFeedbackRequest(CamelModel):
    request_id: int
    rating: int
    comment: str | None = Field(default=None, max_length=MAX_MESSAGE_LENGTH)

    @field_validator('rating')
    @classmethod
    def validate_rating(cls, value: int) -> int:
        if value < MIN_RATING or value > MAX_RATING:
            raise ValueError(f'Rating must be between {MIN_RATING} and {MAX_RATING}.')
        return value


class FeedbackResponse(CamelModel):
    id: int
    from_id: int
    to_id: int
    request_id: int
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


# ----------------------
# Admin
# ----------------------

class StatsResponse(CamelModel):
    total_books: int
    total_users: int
    total_requests: int
    co2_saved: float
