"""Running discount totals for a single compute pass."""

from collections.abc import Iterator


class MethodIdPromoValueMap:
    """Discount already allocated per item / shipping method in the current pass.

    A fresh instance belongs to exactly one compute pass. Action computers
    read it to know how much of a line's subtotal is still discountable and
    write to it whenever they emit an adjustment. Alongside the per-line
    totals it keeps what each promotion code has spent, which the budget
    check adds to the campaign's recorded usage.
    """

    def __init__(self) -> None:
        self._values: dict[str, float] = {}
        self._spent_by_code: dict[str, float] = {}

    def get(self, method_id: str) -> float:
        return self._values.get(method_id, 0.0)

    def add(self, method_id: str, amount: float, code: str) -> float:
        """Record ``amount`` against ``method_id`` on behalf of promotion ``code``."""
        total = self.get(method_id) + amount
        self._values[method_id] = total
        self._spent_by_code[code] = self.spent_for(code) + amount
        return total

    def spent_for(self, code: str) -> float:
        return self._spent_by_code.get(code, 0.0)

    def items(self):
        return self._values.items()

    def __contains__(self, method_id: object) -> bool:
        return method_id in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MethodIdPromoValueMap({self._values!r})"
