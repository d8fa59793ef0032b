"""
Pydantic models for API request validation.

Every mutating endpoint loads its JSON body through ``load_body`` so domain
services only ever see typed, validated input.
"""
import re
from datetime import date as date_type
from typing import Annotated, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic import ValidationError as PydanticValidationError

from backend.errors import ValidationError

_PHONE_RE = re.compile(r'[0-9]{10}')
MIN_PASSWORD_LENGTH = 4
MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 10
MIN_EVENT_SLOTS = 2
MAX_EVENT_SLOTS = 22

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalStr = Optional[Annotated[str, StringConstraints(strip_whitespace=True)]]


def _check_skill_level(value):
    if value is not None and not MIN_SKILL_LEVEL <= value <= MAX_SKILL_LEVEL:
        raise ValueError(f'Skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}')
    return value


class RequestModel(BaseModel):
    model_config = ConfigDict(extra='ignore')


class RegisterRequest(RequestModel):
    name: RequiredStr
    phone: RequiredStr
    password: str
    zone: RequiredStr
    skill_level: int
    position: OptionalStr = None
    bio: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def phone_is_ten_digits(cls, value):
        if not _PHONE_RE.fullmatch(value):
            raise ValueError('Phone must be 10 digits')
        return value

    @field_validator('password')
    @classmethod
    def password_long_enough(cls, value):
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return value

    @field_validator('skill_level')
    @classmethod
    def skill_in_range(cls, value):
        return _check_skill_level(value)


class LoginRequest(RequestModel):
    phone: RequiredStr
    password: Annotated[str, StringConstraints(min_length=1)]


class PlayerUpdateRequest(RequestModel):
    name: OptionalStr = None
    zone: OptionalStr = None
    skill_level: Optional[int] = None
    position: OptionalStr = None
    bio: Optional[str] = None
    avatar_url: OptionalStr = None

    @field_validator('skill_level')
    @classmethod
    def skill_in_range(cls, value):
        return _check_skill_level(value)


class TurfCreateRequest(RequestModel):
    name: RequiredStr
    location: RequiredStr
    price_per_hour: int = Field(gt=0)
    formats: OptionalStr = None
    emoji: OptionalStr = None
    description: Optional[str] = None


class TurfUpdateRequest(RequestModel):
    name: OptionalStr = None
    location: OptionalStr = None
    price_per_hour: Optional[int] = Field(default=None, gt=0)
    formats: OptionalStr = None
    emoji: OptionalStr = None
    description: Optional[str] = None


class BookingRequest(RequestModel):
    turf_id: int
    date: date_type
    slot: RequiredStr


class ConnectionRequest(RequestModel):
    to_player_id: int


class EventCreateRequest(RequestModel):
    title: RequiredStr
    date: date_type
    time: RequiredStr
    total_slots: int
    turf_id: Optional[int] = None
    format: OptionalStr = None
    description: Optional[str] = None

    @field_validator('total_slots')
    @classmethod
    def slots_in_range(cls, value):
        if not MIN_EVENT_SLOTS <= value <= MAX_EVENT_SLOTS:
            raise ValueError(f'total_slots must be {MIN_EVENT_SLOTS}-{MAX_EVENT_SLOTS}')
        return value


class SendMessageRequest(RequestModel):
    to_id: int
    content: RequiredStr


def _describe(exc):
    errors = exc.errors()
    missing = [
        str(err['loc'][0]) for err in errors
        if err.get('loc') and err['type'] in {'missing', 'string_too_short'}
    ]
    if missing:
        return f'Missing required fields: {", ".join(missing)}'

    first = errors[0]
    message = str(first.get('msg') or 'Invalid value')
    if first['type'] == 'value_error':
        return message.removeprefix('Value error, ')
    field = '.'.join(str(part) for part in first.get('loc', ()))
    return f'{field}: {message}' if field else message


def validate_payload(schema_cls, data):
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON payload')
    try:
        return schema_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_describe(exc)) from None


def load_body(schema_cls):
    """Parse the current request's JSON body into ``schema_cls``."""
    return validate_payload(schema_cls, request.get_json(silent=True))
