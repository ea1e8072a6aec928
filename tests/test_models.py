from datetime import datetime
from decimal import Decimal

import pytest

from xpenser.errors import MalformedResponse
from xpenser.models import ExpenseRecord, records_from_response


API_ITEM = {
    "id": 4711,
    "amount": "21.31",
    "date": "2010-07-31T14:04:00",
    "notes": "UpsellIt.com - 5% of July's Upsellit Generated Sales",
    "tags": [93923, 84526],
    "type": "Web Software Rental",
}


def test_from_api_maps_fields():
    rec = ExpenseRecord.from_api(API_ITEM)
    assert rec.id == "4711"
    assert rec.amount == Decimal("21.31")
    assert rec.date == datetime(2010, 7, 31, 14, 4)
    assert rec.tags == [93923, 84526]
    assert rec.category == "Web Software Rental"


def test_from_api_category_fallback_and_defaults():
    rec = ExpenseRecord.from_api({"amount": 400, "date": "2010-08-25", "category": "Freight"})
    assert rec.id is None
    assert rec.amount == Decimal("400")
    assert rec.category == "Freight"
    assert rec.notes == ""
    assert rec.tags == []


def test_from_api_ignores_non_string_category():
    rec = ExpenseRecord.from_api({"amount": 1, "date": "20100825", "category": [36675]})
    assert rec.category == ""
    assert rec.date == datetime(2010, 8, 25)


@pytest.mark.parametrize("item", [
    {"date": "2010-08-25"},
    {"amount": 1},
    {"amount": "abc", "date": "2010-08-25"},
    {"amount": "NaN", "date": "2010-08-25"},
    {"amount": 1, "date": "jello"},
    ["not", "a", "dict"],
])
def test_from_api_rejects_malformed(item):
    with pytest.raises(MalformedResponse):
        ExpenseRecord.from_api(item)


def test_document_round_trip_keeps_negative_amount():
    rec = ExpenseRecord(amount=Decimal("-12.50"), date=datetime(2010, 5, 3, 9, 30), notes="refund",
                        tags=[1, 1], category="Travel")
    doc = rec.to_document()
    assert doc == {
        "amount": "-12.50",
        "date": "2010-05-03T09:30:00",
        "notes": "refund",
        "tags": [1, 1],
        "category": "Travel",
    }
    back = ExpenseRecord.from_document("abc", doc)
    assert back.id == "abc"
    assert back.amount == Decimal("-12.50")
    assert back.date == rec.date


def test_records_from_response_requires_list():
    with pytest.raises(MalformedResponse):
        records_from_response({"expenses": []})
    assert len(records_from_response([API_ITEM, API_ITEM])) == 2
