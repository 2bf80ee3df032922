"""
Investment tracking on top of transactions.

Deposits are expenses in the "investments" category, withdrawals are income.
The investment type travels in the description as a structured tag:

    "[INV:stocks] Monthly contribution"   deposit
    "[RES:stocks] Sold some shares"       withdrawal

Older untagged descriptions are classified by keyword.
"""

import re
from decimal import Decimal
from typing import Dict, Iterable, List

from financex.domain.models import (
    EXPENSE,
    INCOME,
    GoalProgress,
    InvestmentMetadata,
    InvestmentTotals,
    Transaction,
    to_decimal,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

INVESTMENT_CATEGORY = "investments"
FALLBACK_TYPE = "other_investments"

INVESTMENT_TYPES = {
    "emergency_fund": "Emergency Fund",
    "stocks": "Stocks",
    "real_estate_funds": "Real Estate Funds",
    "fixed_income": "Fixed Income",
    "treasury_bonds": "Treasury Bonds",
    "crypto": "Crypto",
    "other_investments": "Other Investments",
}

DEPOSIT_TAG = re.compile(r"^\[INV:([a-z_]+)\]\s*", re.IGNORECASE)
WITHDRAWAL_TAG = re.compile(r"^\[RES:([a-z_]+)\]\s*", re.IGNORECASE)

# Checked in order; first match wins
LEGACY_KEYWORDS = [
    ("emergency_fund", ("emergency", "reserve")),
    ("stocks", ("stock", "shares", "equity")),
    ("real_estate_funds", ("reit", "real estate")),
    ("fixed_income", ("fixed income", "certificate of deposit", "bond fund")),
    ("treasury_bonds", ("treasury", "t-bill", "tips")),
    ("crypto", ("crypto", "bitcoin", "btc", "ethereum")),
]


def _known_type(raw: str) -> str:
    value = raw.lower()
    return value if value in INVESTMENT_TYPES else FALLBACK_TYPE


def _legacy_type(description: str) -> str:
    text = description.lower()
    for investment_type, keywords in LEGACY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return investment_type
    return FALLBACK_TYPE


def clean_description(description: str) -> str:
    """Description without its structured tag"""
    return WITHDRAWAL_TAG.sub("", DEPOSIT_TAG.sub("", description.strip())).strip()


def encode_investment_description(investment_type: str, user_description: str, is_withdrawal: bool = False) -> str:
    """Prefix the description with a tag; an existing tag is replaced, an empty text gets the type label"""
    prefix = "RES" if is_withdrawal else "INV"
    text = clean_description(user_description)
    return f"[{prefix}:{investment_type}] {text or INVESTMENT_TYPES.get(investment_type, investment_type)}"


def decode_investment_description(description: str) -> InvestmentMetadata:
    match = DEPOSIT_TAG.match(description)
    if match:
        return InvestmentMetadata(
            type=_known_type(match.group(1)),
            is_withdrawal=False,
            user_description=DEPOSIT_TAG.sub("", description).strip(),
            has_structured_tag=True,
        )

    match = WITHDRAWAL_TAG.match(description)
    if match:
        return InvestmentMetadata(
            type=_known_type(match.group(1)),
            is_withdrawal=True,
            user_description=WITHDRAWAL_TAG.sub("", description).strip(),
            has_structured_tag=True,
        )

    return InvestmentMetadata(
        type=_legacy_type(description),
        is_withdrawal="withdrawal" in description.lower(),
        user_description=description,
        has_structured_tag=False,
    )


def filter_deposits(transactions: Iterable[Transaction]) -> List[Transaction]:
    return [t for t in transactions if t.type == EXPENSE and t.category == INVESTMENT_CATEGORY]


def filter_withdrawals(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Income tagged [RES:...], or legacy income mentioning a withdrawal"""
    return [
        t for t in transactions
        if t.type == INCOME
        and (WITHDRAWAL_TAG.match(t.description) or "withdrawal" in t.description.lower())
    ]


def investment_totals(transactions: Iterable[Transaction]) -> InvestmentTotals:
    transactions = list(transactions)
    deposits = sum((t.value for t in filter_deposits(transactions)), ZERO)
    withdrawals = sum((t.value for t in filter_withdrawals(transactions)), ZERO)
    return InvestmentTotals(
        total_deposits=deposits,
        total_withdrawals=withdrawals,
        net_invested=max(ZERO, deposits - withdrawals),
    )


def aggregate_by_investment_type(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """Net amount per investment type; a type never drops below zero"""
    transactions = list(transactions)
    grouped: Dict[str, Decimal] = {}

    for t in filter_deposits(transactions):
        investment_type = decode_investment_description(t.description).type
        grouped[investment_type] = grouped.get(investment_type, ZERO) + t.value

    for t in filter_withdrawals(transactions):
        investment_type = decode_investment_description(t.description).type
        grouped[investment_type] = max(ZERO, grouped.get(investment_type, ZERO) - t.value)

    return grouped


def goal_progress(invested, target) -> GoalProgress:
    invested = to_decimal(invested)
    target = to_decimal(target)
    if target <= 0:
        return GoalProgress(progress=ZERO, remaining=ZERO)

    return GoalProgress(
        progress=min(invested / target * HUNDRED, HUNDRED),
        remaining=max(target - invested, ZERO),
    )
