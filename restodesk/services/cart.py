"""
Cart Engine

Collects menu items into order lines before an order is placed. Lines keep
the order in which items were first added, and each line's price is the
catalog price at the moment the item was first added, so later menu edits
never change an open cart.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from restodesk.models import MenuItem


@dataclass
class CartLine:
    """A pending quantity of one menu item."""
    menu_item_id: str
    quantity: int
    price: float
    notes: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return asdict(self)


def lines_total(lines) -> float:
    """Sum of price × quantity over cart lines or order line dicts, rounded to cents."""
    total = 0.0
    for line in lines:
        if isinstance(line, dict):
            total += line["price"] * line["quantity"]
        else:
            total += line.price * line.quantity
    return round(total, 2)


class Cart:
    """Ordered cart lines keyed by menu item id."""

    def __init__(self):
        self._lines: dict[str, CartLine] = {}

    def add(self, item: MenuItem) -> CartLine:
        """One more of this item; a new line snapshots the current price."""
        line = self._lines.get(item.id)
        if line is not None:
            line.quantity += 1
        else:
            line = CartLine(menu_item_id=item.id, quantity=1, price=float(item.price))
            self._lines[item.id] = line
        return line

    def remove(self, item_id: str) -> Optional[CartLine]:
        """One less of this item; the line goes away instead of reaching zero."""
        line = self._lines.get(item_id)
        if line is None:
            return None
        if line.quantity > 1:
            line.quantity -= 1
            return line
        del self._lines[item_id]
        return None

    def set_note(self, item_id: str, text: Optional[str]) -> Optional[CartLine]:
        line = self._lines.get(item_id)
        if line is not None:
            line.notes = text
        return line

    def total(self) -> float:
        return lines_total(self._lines.values())

    def clear(self) -> None:
        self._lines.clear()

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, item_id: str) -> Optional[CartLine]:
        return self._lines.get(item_id)

    def to_order_items(self) -> list[dict]:
        """Lines in the JSON shape stored on orders."""
        return [line.to_dict() for line in self._lines.values()]

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self.lines())
