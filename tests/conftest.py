"""
Shared fixtures for the revenue metrics tests.

Snapshots are built as small in-memory DataFrames so each test states
exactly which payments it relies on.
"""
import logging

import pandas as pd
import pytest

CONFIG_ENV_VARS = [
    "PAYMENTS_RAW_PATH", "USERS_RAW_PATH", "PAYMENTS_CLEAN_PATH",
    "USERS_CLEAN_PATH", "OUTPUT_DIR", "LOG_PATH", "LOG_LEVEL",
]


def make_payments(rows):
    """rows: (user_id, payment_date, revenue_amount_usd)"""
    df = pd.DataFrame(rows, columns=["user_id", "payment_date", "revenue_amount_usd"])
    df["payment_date"] = pd.to_datetime(df["payment_date"], format="mixed")
    df["revenue_amount_usd"] = df["revenue_amount_usd"].astype(float)
    return df


def make_users(rows):
    """rows: (user_id, language, age)"""
    return pd.DataFrame(rows, columns=["user_id", "language", "age"])


@pytest.fixture
def scenario_payments():
    # A pays $10 in Jan and $15 in Feb, B pays $10 in Jan only
    return make_payments([
        ("A", "2024-01-05", 10),
        ("A", "2024-02-10", 15),
        ("B", "2024-01-20", 10),
    ])


@pytest.fixture
def scenario_users():
    return make_users([
        ("A", "en", 25),
        ("B", "en", 25),
    ])


@pytest.fixture
def clean_env(monkeypatch):
    """
    Start with none of the config variables set and remove anything a
    .env file loads during the test.
    """
    for name in CONFIG_ENV_VARS:
        # setenv first so the undo step deletes whatever ends up there
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield monkeypatch


@pytest.fixture
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
