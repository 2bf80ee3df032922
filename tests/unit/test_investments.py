"""Unit tests for investment tags and totals"""

from datetime import date, datetime
from decimal import Decimal
from financex.domain.models import Transaction
from financex.domain.investments import (
    encode_investment_description,
    decode_investment_description,
    clean_description,
    investment_totals,
    aggregate_by_investment_type,
    goal_progress,
)


def make(tx_id: str, type: str, category: str, description: str, value: str) -> Transaction:
    return Transaction(
        id=tx_id,
        type=type,
        category=category,
        date=date(2024, 3, 1),
        description=description,
        value=Decimal(value),
        created_at=datetime(2024, 3, 1),
    )


def test_encode_investment_description():
    assert encode_investment_description("stocks", "Monthly buy") == "[INV:stocks] Monthly buy"
    assert encode_investment_description("crypto", "Cash out", is_withdrawal=True) == "[RES:crypto] Cash out"


def test_encode_replaces_existing_tag_and_fills_empty_text():
    assert encode_investment_description("stocks", "[INV:crypto] Rebalance") == "[INV:stocks] Rebalance"
    assert encode_investment_description("emergency_fund", "  ") == "[INV:emergency_fund] Emergency Fund"


def test_decode_structured_tags():
    deposit = decode_investment_description("[INV:treasury_bonds] Monthly")
    assert deposit.type == "treasury_bonds"
    assert deposit.is_withdrawal is False
    assert deposit.user_description == "Monthly"
    assert deposit.has_structured_tag is True

    withdrawal = decode_investment_description("[res:STOCKS] Sold")
    assert withdrawal.type == "stocks"
    assert withdrawal.is_withdrawal is True


def test_decode_unknown_tag_falls_back():
    assert decode_investment_description("[INV:gold_bars] Shiny").type == "other_investments"


def test_decode_legacy_description():
    """Test untagged descriptions are classified by keyword"""
    legacy = decode_investment_description("Bought bitcoin")
    assert legacy.type == "crypto"
    assert legacy.has_structured_tag is False
    assert decode_investment_description("Something else").type == "other_investments"


def test_clean_description():
    assert clean_description("[RES:crypto]   Partial exit ") == "Partial exit"
    assert clean_description("Plain") == "Plain"


def test_investment_totals_and_breakdown():
    """Test deposits minus withdrawals, overall and per type"""
    transactions = [
        make("d1", "expense", "investments", "[INV:stocks] Buy", "1000"),
        make("d2", "expense", "investments", "[INV:crypto] Buy", "300"),
        make("w1", "income", "other_income", "[RES:crypto] Sell", "500"),
        make("w2", "income", "other_income", "[RES:stocks] Sell", "200"),
        make("x", "expense", "groceries", "[INV:stocks] Not an investment", "999"),
        make("y", "income", "salary", "Salary", "5000"),
    ]

    totals = investment_totals(transactions)
    assert totals.total_deposits == Decimal("1300")
    assert totals.total_withdrawals == Decimal("700")
    assert totals.net_invested == Decimal("600")

    by_type = aggregate_by_investment_type(transactions)
    assert by_type["stocks"] == Decimal("800")
    assert by_type["crypto"] == 0  # Never below zero


def test_investment_totals_never_negative():
    transactions = [make("w", "income", "other_income", "[RES:stocks] Sell", "50")]
    assert investment_totals(transactions).net_invested == 0


def test_goal_progress():
    half = goal_progress(500, 1000)
    assert half.progress == 50
    assert half.remaining == 500

    beyond = goal_progress(1500, 1000)
    assert beyond.progress == 100
    assert beyond.remaining == 0

    none = goal_progress(100, 0)
    assert none.progress == 0
    assert none.remaining == 0
