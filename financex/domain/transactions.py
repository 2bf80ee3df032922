"""Filtering and aggregation over transaction collections"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from financex.domain.models import CategoryAggregate, Transaction

ZERO = Decimal("0")


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Transaction]:
    """Transactions dated within [start, end]; a missing bound is open"""
    return [
        t for t in transactions
        if (start is None or t.date >= start) and (end is None or t.date <= end)
    ]


def sort_by_date_descending(transactions: Iterable[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def filter_by_type(transactions: Iterable[Transaction], type: str) -> List[Transaction]:
    return [t for t in transactions if t.type == type]


def filter_by_category(transactions: Iterable[Transaction], category: str) -> List[Transaction]:
    return [t for t in transactions if t.category == category]


def calculate_total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.value for t in transactions), ZERO)


def aggregate_by_category(
    transactions: Iterable[Transaction],
    type: Optional[str] = None,
) -> List[CategoryAggregate]:
    """
    Group transactions by category.

    When type is given only that type is grouped. Percentages are relative
    to the grouped total. Largest category first.
    """
    filtered = filter_by_type(transactions, type) if type else list(transactions)
    grand_total = calculate_total(filtered)

    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for t in filtered:
        totals[t.category] = totals.get(t.category, ZERO) + t.value
        counts[t.category] = counts.get(t.category, 0) + 1

    aggregates = [
        CategoryAggregate(
            category=category,
            total=total,
            count=counts[category],
            percentage=total / grand_total * 100 if grand_total > 0 else ZERO,
        )
        for category, total in totals.items()
    ]
    return sorted(aggregates, key=lambda a: a.total, reverse=True)
