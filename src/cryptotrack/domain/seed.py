# src/cryptotrack/domain/seed.py
"""
Seed Data - Mock Session Contents

Initial coins, mock user, bank accounts and starter portfolio loaded into a
fresh state container. Factories return new objects on every call so that
separate containers never share mutable coin records.

Files that USE this module:
- cryptotrack.application.app_state (default data for a new session)
- tests.* (fixtures)
"""

from __future__ import annotations

from cryptotrack.domain.models import TX_BUY, BankAccount, Coin, Transaction, User

MOCK_USER = User(
    id="u1",
    name="Alex Crypto",
    email="alex@example.com",
    avatar="https://picsum.photos/200/200",
)

MOCK_BANK_ACCOUNTS = (
    BankAccount(id="b1", bank_name="Chase", last_four="4242", balance=15000.50),
    BankAccount(id="b2", bank_name="Wells Fargo", last_four="8899", balance=2500.00),
)

DEFAULT_FAVORITES = ("bitcoin", "solana")

STARTING_FIAT_BALANCE = 12450.00


def initial_coins() -> list[Coin]:
    return [
        Coin(
            id="bitcoin",
            symbol="btc",
            name="Bitcoin",
            current_price=64231.45,
            price_change_percentage_24h=2.4,
            image="https://cryptologos.cc/logos/bitcoin-btc-logo.png",
            sparkline=[62000, 62500, 61800, 63000, 63500, 64231],
            market_cap=1_200_000_000_000,
        ),
        Coin(
            id="ethereum",
            symbol="eth",
            name="Ethereum",
            current_price=3452.12,
            price_change_percentage_24h=1.2,
            image="https://cryptologos.cc/logos/ethereum-eth-logo.png",
            sparkline=[3300, 3350, 3320, 3400, 3420, 3452],
            market_cap=400_000_000_000,
        ),
        Coin(
            id="solana",
            symbol="sol",
            name="Solana",
            current_price=145.67,
            price_change_percentage_24h=-5.4,
            image="https://cryptologos.cc/logos/solana-sol-logo.png",
            sparkline=[155, 154, 150, 148, 146, 145],
            market_cap=65_000_000_000,
        ),
        Coin(
            id="ripple",
            symbol="xrp",
            name="XRP",
            current_price=0.62,
            price_change_percentage_24h=0.5,
            image="https://cryptologos.cc/logos/xrp-xrp-logo.png",
            sparkline=[0.60, 0.61, 0.61, 0.62, 0.61, 0.62],
            market_cap=34_000_000_000,
        ),
        Coin(
            id="cardano",
            symbol="ada",
            name="Cardano",
            current_price=0.45,
            price_change_percentage_24h=-1.2,
            image="https://cryptologos.cc/logos/cardano-ada-logo.png",
            sparkline=[0.46, 0.46, 0.45, 0.45, 0.44, 0.45],
            market_cap=16_000_000_000,
        ),
        Coin(
            id="dogecoin",
            symbol="doge",
            name="Dogecoin",
            current_price=0.16,
            price_change_percentage_24h=8.5,
            image="https://cryptologos.cc/logos/dogecoin-doge-logo.png",
            sparkline=[0.14, 0.14, 0.15, 0.15, 0.16, 0.16],
            market_cap=23_000_000_000,
        ),
        Coin(
            id="polkadot",
            symbol="dot",
            name="Polkadot",
            current_price=7.23,
            price_change_percentage_24h=-2.1,
            image="https://cryptologos.cc/logos/polkadot-new-dot-logo.png",
            sparkline=[7.5, 7.4, 7.3, 7.3, 7.2, 7.23],
            market_cap=10_000_000_000,
        ),
    ]


def initial_portfolio() -> list[Transaction]:
    return [
        Transaction(id="t1", coin_id="bitcoin", amount=0.05, price_at_buy=55000, date="2023-11-15", type=TX_BUY),
        Transaction(id="t2", coin_id="ethereum", amount=1.5, price_at_buy=2800, date="2024-01-10", type=TX_BUY),
    ]
