import re
from decimal import Decimal, InvalidOperation

from email_validator import EmailNotValidError, validate_email

from ..schemas.auth import CredentialsPayload, SignupPayload
from ..schemas.product import Category, ProductForm
from ..schemas.store import StoreForm

PHONE_PATTERN = re.compile(r"^[0-9]{10}$")
MIN_PASSWORD_LENGTH = 6


class FormValidationError(ValueError):
    """User input rejected before anything reaches the backend."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def is_valid_phone_number(phone_number: str) -> bool:
    return bool(PHONE_PATTERN.match(phone_number.strip()))


def validate_credentials(payload: CredentialsPayload) -> None:
    if not payload.email or not payload.password:
        raise FormValidationError("Email and password are required")
    if not is_valid_email(payload.email):
        raise FormValidationError("Please enter a valid email address")
    if not is_valid_password(payload.password):
        raise FormValidationError("Password must be at least 6 characters")
    if isinstance(payload, SignupPayload) and payload.password != payload.confirm_password:
        raise FormValidationError("Passwords do not match")


def validate_reset_email(email: str) -> None:
    if not email:
        raise FormValidationError("Please enter your email address")
    if not is_valid_email(email):
        raise FormValidationError("Please enter a valid email address")


def validate_profile_form(name: str) -> str:
    name = name.strip()
    if not name:
        raise FormValidationError("Name is required")
    return name


def validate_store_form(form: StoreForm) -> dict:
    values = {
        "store_name": form.store_name.strip(),
        "address": form.address.strip(),
        "owner_name": form.owner_name.strip(),
        "phone_number": form.phone_number.strip(),
    }
    if not all(values.values()):
        raise FormValidationError("All fields are required")
    if not is_valid_phone_number(values["phone_number"]):
        raise FormValidationError("Please enter a valid 10-digit phone number")
    return values


def _blank(value) -> bool:
    return value is None or str(value).strip() == ""


def validate_product_form(form: ProductForm) -> dict:
    """
    Checks an add-product form and returns the column values to insert.

    Checks run in a fixed order so the first failing rule decides the message:
    required fields, price, stock, then category.
    """
    if any(_blank(v) for v in (form.name, form.category, form.price, form.stock)):
        raise FormValidationError("All fields are required")

    try:
        price = Decimal(str(form.price).strip())
    except InvalidOperation:
        price = None
    if price is None or not price.is_finite() or price <= 0:
        raise FormValidationError("Price must be a positive number")

    try:
        stock = int(str(form.stock).strip())
    except ValueError:
        stock = None
    if stock is None or stock < 0:
        raise FormValidationError("Stock must be a non-negative integer")

    try:
        category = Category(form.category.strip().lower())
    except ValueError:
        options = ", ".join(c.value for c in Category)
        raise FormValidationError(f"Category must be one of {options}") from None

    return {
        "name": form.name.strip(),
        "category": category.value,
        "price": float(price),
        "stock": stock,
    }
