"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from milksync.domain.exceptions import ValidationError

_CENTS = Decimal("0.01")
_SYMBOLS = {"INR": "₹"}


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal so sums over many line items never pick up binary
    floating-point error. Rounding to cents happens only in ``display``.
    """

    amount: Decimal
    currency: str = "INR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | Decimal) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError(
                f"Can only multiply Money by int or Decimal, got {type(factor).__name__}"
            )
        return Money(self.amount * factor, self.currency)

    def minus_floored(self, other: Money) -> Money:
        """Subtract, stopping at zero instead of going negative."""
        self._assert_same_currency(other)
        return Money(max(self.amount - other.amount, Decimal("0")), self.currency)

    # --- Display --------------------------------------------------------------

    def display(self) -> Decimal:
        """The amount rounded half-up to two decimal places."""
        return self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP)

    def __str__(self) -> str:
        symbol = _SYMBOLS.get(self.currency, f"{self.currency} ")
        return f"{symbol}{self.display():.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero(currency: str = "INR") -> Money:
        return Money(Decimal("0"), currency)

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer tub count.

    Enforces the invariant that a line can never hold zero or negative tubs.
    Removing a line is a separate action.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


ACTOR_ROLES = ("admin", "staff")
_DEFAULT_ACTOR_NAMES = {"admin": "Admin", "staff": "Staff Member"}


@dataclass(frozen=True)
class Actor:
    """Who performed a change: the ``updatedBy`` audit stamp."""

    role: str
    id: str
    name: str

    def __post_init__(self) -> None:
        if self.role not in ACTOR_ROLES:
            raise ValidationError(
                f"Actor role must be one of {', '.join(ACTOR_ROLES)}, got {self.role!r}"
            )
        if not self.id or not str(self.id).strip():
            raise ValidationError("Actor id is required")

    @staticmethod
    def create(role: str, id: str, name: str | None = None) -> Actor:
        role = (role or "").strip().lower()
        display = (name or "").strip() or _DEFAULT_ACTOR_NAMES.get(role, "")
        return Actor(role=role, id=str(id).strip(), name=display)
