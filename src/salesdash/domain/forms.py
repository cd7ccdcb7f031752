"""Input schemas for every form the dashboard submits.

Each schema is validated before the backend is contacted. Violations are
collected per field and raised as :class:`ValidationError` so the view can
show every message next to its input at once.
"""
from __future__ import annotations

import re
from typing import Any, Optional, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from salesdash.domain.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

MSG_NAME = "El nombre debe tener al menos 2 caracteres"
MSG_EMAIL = "Email inválido"
MSG_PASSWORD = "La contraseña debe tener al menos 6 caracteres"
MSG_PASSWORD_MISMATCH = "Las contraseñas no coinciden"
MSG_CURRENT_PASSWORD = "Debes ingresar tu contraseña actual para cambiarla"
MSG_DESCRIPTION = "La descripción debe tener al menos 5 caracteres"
MSG_PRODUCT = "Debes seleccionar un producto"
MSG_USER = "Debes seleccionar un usuario"
MSG_QUANTITY = "La cantidad debe ser mayor a 0"
MSG_PRICE = "El precio debe ser mayor a 0"
MSG_DATE = "La fecha es requerida"

FormT = TypeVar("FormT", bound=BaseModel)


def _fail(message: str, field: Optional[str] = None) -> PydanticCustomError:
    # model-level checks carry the field they belong to in ctx
    return PydanticCustomError("form", message, {"field": field} if field else None)


def _min_length(value: Any, size: int, message: str) -> str:
    text = "" if value is None else str(value)
    if len(text) < size:
        raise _fail(message)
    return text


def _email(value: Any) -> str:
    text = ("" if value is None else str(value)).strip()
    if not _EMAIL_RE.match(text):
        raise _fail(MSG_EMAIL)
    return text


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", ".")
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def _at_least(value: Any, minimum: float, message: str) -> float:
    number = _parse_number(value)
    if number is None or number < minimum:
        raise _fail(message)
    return number


class _Form(BaseModel):
    model_config = ConfigDict(validate_default=True, extra="ignore")


class LoginForm(_Form):
    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        return _email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, v):
        return _min_length(v, 6, MSG_PASSWORD)

    def to_payload(self) -> dict:
        return {"email": self.email, "password": self.password}


class RegisterForm(_Form):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v):
        return _min_length(("" if v is None else str(v)).strip(), 2, MSG_NAME)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        return _email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, v):
        return _min_length(v, 6, MSG_PASSWORD)

    @field_validator("confirm_password", mode="before")
    @classmethod
    def _check_confirm(cls, v, info: ValidationInfo):
        text = _min_length(v, 6, MSG_PASSWORD)
        password = info.data.get("password")
        if password is not None and text != password:
            raise _fail(MSG_PASSWORD_MISMATCH)
        return text

    def to_payload(self) -> dict:
        return {"name": self.name, "email": self.email, "password": self.password}


class ProductForm(_Form):
    name: str = ""
    description: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v):
        return _min_length(("" if v is None else str(v)).strip(), 2, MSG_NAME)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, v):
        return _min_length(("" if v is None else str(v)).strip(), 5, MSG_DESCRIPTION)

    def to_payload(self) -> dict:
        return {"name": self.name, "description": self.description}


class SaleForm(_Form):
    product_id: int = 0
    user_id: int = 0
    quantity: float = 0
    unit_price: float = 0
    date: str = ""

    @field_validator("product_id", mode="before")
    @classmethod
    def _check_product(cls, v):
        return int(_at_least(v, 1, MSG_PRODUCT))

    @field_validator("user_id", mode="before")
    @classmethod
    def _check_user(cls, v):
        return int(_at_least(v, 1, MSG_USER))

    @field_validator("quantity", mode="before")
    @classmethod
    def _check_quantity(cls, v):
        return _at_least(v, 1, MSG_QUANTITY)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _check_price(cls, v):
        return _at_least(v, 0.01, MSG_PRICE)

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, v):
        return _min_length(("" if v is None else str(v)).strip(), 1, MSG_DATE)

    def to_payload(self) -> dict:
        quantity = int(self.quantity) if float(self.quantity).is_integer() else self.quantity
        return {
            "productId": self.product_id,
            "userId": self.user_id,
            "quantity": quantity,
            "unitPrice": self.unit_price,
            "date": self.date,
        }


class ProfileForm(_Form):
    name: str = ""
    email: str = ""
    current_password: Optional[str] = None
    new_password: Optional[str] = None
    confirm_password: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v):
        return _min_length(("" if v is None else str(v)).strip(), 2, MSG_NAME)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        return _email(v)

    @field_validator("current_password", "new_password", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return v or None

    @field_validator("confirm_password", mode="before")
    @classmethod
    def _check_password_change(cls, v, info: ValidationInfo):
        confirm = v or None
        new = info.data.get("new_password")
        if new and new != confirm:
            raise _fail(MSG_PASSWORD_MISMATCH)
        return confirm

    @model_validator(mode="after")
    def _check_current_password(self) -> "ProfileForm":
        if self.new_password and not self.current_password:
            raise _fail(MSG_CURRENT_PASSWORD, field="current_password")
        return self

    @property
    def changes_password(self) -> bool:
        return bool(self.new_password and self.current_password)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"name": self.name, "email": self.email}
        if self.changes_password:
            payload["currentPassword"] = self.current_password
            payload["newPassword"] = self.new_password
        return payload


def validate_form(model_cls: type[FormT], data: dict) -> FormT:
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        field_errors: dict[str, str] = {}
        for err in exc.errors():
            ctx = err.get("ctx") or {}
            if ctx.get("field"):
                field = str(ctx["field"])
            else:
                field = str(err["loc"][0]) if err["loc"] else "__all__"
            field_errors.setdefault(field, err["msg"])
        first = next(iter(field_errors.values()), "Datos inválidos")
        raise ValidationError(first, field_errors) from exc
