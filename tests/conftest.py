"""
Shared pytest fixtures.

Files that USE this module:
- pytest (fixtures are injected into every test module)

Files that this module USES:
- cryptotrack.application.app_state (AppState)
- cryptotrack.adapters.persistence.preference_store (PreferenceStore)
- cryptotrack.shared.rate_limiter (rate_limiter reset between tests)
"""
import random

import pytest

from cryptotrack.adapters.persistence.preference_store import PreferenceStore
from cryptotrack.application.app_state import AppState
from cryptotrack.domain import seed
from cryptotrack.shared.rate_limiter import rate_limiter


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def pref_path(tmp_path):
    return tmp_path / "data" / "preferences.json"


@pytest.fixture
def store(pref_path):
    return PreferenceStore(pref_path)


@pytest.fixture
def state(store):
    return AppState(preference_store=store, rng=random.Random(7))


@pytest.fixture
def bitcoin():
    return seed.initial_coins()[0]
