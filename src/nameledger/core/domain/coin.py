"""
Coin — непрозрачный fungible value token

Минимальная модель платёжного примитива: целочисленное неотрицательное
значение с операциями split / merge / value.

Инварианты:
- value >= 0 всегда
- split(amount) уменьшает исходный coin ровно на amount
- merge(other) переносит всё значение other, other становится нулевым
- destroy_zero() допустим только для нулевого coin
"""

from nameledger.core.errors import InsufficientFundsError


# =============================================================================
# VALIDATION
# =============================================================================


def validate_amount(amount: int, name: str = "amount") -> int:
    """
    Проверка суммы: целое неотрицательное число.

    Args:
        amount: Сумма в минимальных единицах
        name: Имя параметра для сообщения об ошибке

    Returns:
        amount без изменений

    Raises:
        ValueError: Если amount не int (bool не допускается) или отрицательный
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be an integer, got {amount!r}")
    if amount < 0:
        raise ValueError(f"{name} must be non-negative, got {amount}")
    return amount


# =============================================================================
# COIN
# =============================================================================


class Coin:
    """Value token с изменяемым балансом."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        self._value = validate_amount(value, "value")

    @classmethod
    def zero(cls) -> "Coin":
        return cls(0)

    @property
    def value(self) -> int:
        return self._value

    def is_zero(self) -> bool:
        return self._value == 0

    def split(self, amount: int) -> "Coin":
        """
        Отделение amount в новый coin.

        Raises:
            InsufficientFundsError: Если amount > value (исходный coin не меняется)
        """
        validate_amount(amount)
        if amount > self._value:
            raise InsufficientFundsError(required=amount, available=self._value)
        self._value -= amount
        return Coin(amount)

    def merge(self, other: "Coin") -> None:
        """Поглощение other: value переходит в self, other обнуляется."""
        if other is self:
            raise ValueError("Cannot merge a coin into itself")
        self._value += other._value
        other._value = 0

    def destroy_zero(self) -> None:
        """
        Уничтожение нулевого coin.

        Raises:
            ValueError: Если value != 0 (ненулевое значение нельзя уничтожить)
        """
        if self._value != 0:
            raise ValueError(f"Cannot destroy non-zero coin (value={self._value})")

    def __repr__(self) -> str:
        return f"Coin(value={self._value})"
