from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
PASSWORD_TOO_SHORT = "Password must be at least 8 characters long"
FIELDS_REQUIRED = "Please fill in all fields"
MIN_PASSWORD_LENGTH = 8


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def first_message(self) -> str | None:
        field = self.first_invalid_field
        return self.field_errors[field] if field else None

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


def _is_blank(value: str | None) -> bool:
    return not (value or "").strip()


def validate_signup_form(
    username: str | None,
    email: str | None,
    password: str | None,
    confirm_password: str | None,
) -> FormResult:
    """Checks run in a fixed order and stop at the first failure.

    Email and passwords are passed on exactly as typed.
    """
    values = {
        "username": (username or "").strip(),
        "email": email or "",
        "password": password or "",
        "confimpassword": confirm_password or "",
    }
    field_errors: dict[str, str] = {}
    if values["password"] != values["confimpassword"]:
        field_errors["confimpassword"] = PASSWORDS_DO_NOT_MATCH
    elif len(values["password"]) < MIN_PASSWORD_LENGTH:
        field_errors["password"] = PASSWORD_TOO_SHORT
    elif not values["username"] or _is_blank(values["email"]):
        field_errors["username" if not values["username"] else "email"] = FIELDS_REQUIRED
    return FormResult(values=values, field_errors=field_errors)


def validate_login_form(email: str | None, password: str | None) -> FormResult:
    values = {"email": email or "", "password": password or ""}
    field_errors: dict[str, str] = {}
    if _is_blank(values["email"]):
        field_errors["email"] = FIELDS_REQUIRED
    elif not values["password"]:
        field_errors["password"] = FIELDS_REQUIRED
    return FormResult(values=values, field_errors=field_errors)
