from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from .dates import parse_date
from .errors import InvalidDateFormat, MalformedResponse

# tag_id => tag_name
TagDictionary = Dict[int, str]


@dataclass
class ExpenseRecord:
    amount: Decimal
    date: datetime
    notes: str = ""
    tags: List[int] = field(default_factory=list)
    category: str = ""
    id: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict) -> "ExpenseRecord":
        """xpenser APIのレスポンス要素1件からレコードを作る"""
        if not isinstance(item, dict):
            raise MalformedResponse(f"Expense element is not an object: {item!r}")
        if "amount" not in item or "date" not in item:
            raise MalformedResponse(f"Expense element lacks amount/date: {item!r}")

        try:
            amount = Decimal(str(item["amount"]))
        except InvalidOperation:
            raise MalformedResponse(f"Invalid amount: {item['amount']!r}") from None
        if not amount.is_finite():
            raise MalformedResponse(f"Invalid amount: {item['amount']!r}")

        try:
            expense_date = _parse_api_date(item["date"])
        except InvalidDateFormat as e:
            raise MalformedResponse(str(e)) from e

        # type が自由記述のラベル。category はフォールバック
        category = item.get("type")
        if not isinstance(category, str):
            category = item.get("category")
        if not isinstance(category, str):
            category = ""

        expense_id = item.get("id")
        return cls(
            id=str(expense_id) if expense_id is not None else None,
            amount=amount,
            date=expense_date,
            notes=item.get("notes") or "",
            tags=list(item.get("tags") or []),
            category=category,
        )

    def to_document(self) -> Dict:
        """ドキュメントストアに保存する形へ変換"""
        return {
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "notes": self.notes,
            "tags": list(self.tags),
            "category": self.category,
        }

    @classmethod
    def from_document(cls, doc_id: str, doc: Dict) -> "ExpenseRecord":
        return cls(
            id=doc_id,
            amount=Decimal(doc["amount"]),
            date=datetime.fromisoformat(doc["date"]),
            notes=doc.get("notes", ""),
            tags=list(doc.get("tags", [])),
            category=doc.get("category", ""),
        )


def records_from_response(items) -> List[ExpenseRecord]:
    if not isinstance(items, list):
        raise MalformedResponse(f"Expected a list of expenses, got {type(items).__name__}")
    return [ExpenseRecord.from_api(item) for item in items]


def _parse_api_date(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise InvalidDateFormat(f"Could not turn {value!r} into an xpenser formatted date")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return parse_date(value)
