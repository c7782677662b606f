"""Request body schemas. Validation failures surface as INVALID_INPUT errors."""
from datetime import datetime
from typing import Literal, Optional
import re

from flask import request
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from .utils import to_naive_utc, utc_now

# At least one lowercase, one uppercase, one digit and one non-alphanumeric
STRONG_PASSWORD = re.compile(r'(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[^A-Za-z0-9])')


class Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra='ignore')


def parse_body(schema):
    """Validate the JSON body of the current request against ``schema``."""
    return schema.model_validate(request.get_json(silent=True) or {})


def parse_args(schema):
    """Validate the query string of the current request against ``schema``."""
    return schema.model_validate(request.args.to_dict())


def normalize_email(value):
    # Addresses are stored lower-cased so the unique constraint matches lookups
    return value.lower()


# =============================================================================
# Users and authentication
# =============================================================================

class NewUserSchema(Schema):
    """Profile-only account, without credentials."""
    email: EmailStr
    name: str = Field(min_length=1, max_length=25)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)

    lowercase_email = field_validator('email')(normalize_email)


class SignupSchema(Schema):
    email: EmailStr
    name: str = Field(min_length=1, max_length=25)
    password: str = Field(min_length=8, max_length=24)
    confirmation: str = Field(min_length=8, max_length=24)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)

    lowercase_email = field_validator('email')(normalize_email)

    @field_validator('password')
    @classmethod
    def password_is_strong(cls, value):
        if not STRONG_PASSWORD.search(value):
            raise PydanticCustomError('weak_password', 'Password is not strong enough')
        return value

    @field_validator('confirmation')
    @classmethod
    def confirmation_matches(cls, value, info: ValidationInfo):
        password = info.data.get('password')
        if password is not None and value != password:
            raise PydanticCustomError('password_mismatch', 'Password and confirmation must match')
        return value


class LoginSchema(Schema):
    email: str = ''
    password: str = ''

    lowercase_email = field_validator('email')(normalize_email)


class UpdateUserSchema(Schema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=25)
    description: Optional[str] = Field(default=None, max_length=255)
    # Current password, re-entered to authorize the change
    password: str = Field(min_length=1)


# =============================================================================
# Clubs
# =============================================================================

class ClubSchema(Schema):
    name: str = Field(min_length=1, max_length=30)
    description: str = Field(min_length=1, max_length=255)


class UpdateClubSchema(Schema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=30)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    owner_id: Optional[int] = Field(default=None, alias='ownerId', gt=0)


# =============================================================================
# Posts
# =============================================================================

class PostSchema(Schema):
    title: str = Field(min_length=1, max_length=30)
    content: str = Field(min_length=1, max_length=5000)


class UpdatePostSchema(Schema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=30)
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)


# =============================================================================
# Events
# =============================================================================

class EventSchema(Schema):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=255)
    date: datetime

    @field_validator('date')
    @classmethod
    def date_not_in_past(cls, value):
        value = to_naive_utc(value)
        if value < utc_now():
            raise PydanticCustomError('date_in_past', 'Event is too old')
        return value


class UpdateEventSchema(Schema):
    """Event changes. Past dates are accepted and mark the event finished."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[datetime] = None

    @field_validator('date')
    @classmethod
    def normalize_date(cls, value):
        return to_naive_utc(value)


class EventQuerySchema(Schema):
    finished: Optional[bool] = None
    date: Literal['asc', 'desc'] = 'desc'
