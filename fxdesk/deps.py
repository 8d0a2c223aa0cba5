# fxdesk/deps.py
#
# Process-wide service singletons handed to routes via Depends(...).
# Tests swap them out with app.dependency_overrides.

import random
from functools import lru_cache
from typing import Optional

from fxdesk.config import Settings
from fxdesk.services.analysis import AnalysisProvider, TemplateAnalysisProvider
from fxdesk.services.ledger import Ledger
from fxdesk.services.rates import RateProvider


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def _random_source() -> random.Random:
    seed: Optional[int] = get_settings().random_seed
    return random.Random(seed)


@lru_cache
def get_rate_provider() -> RateProvider:
    return RateProvider(jitter=get_settings().rate_jitter, rng=_random_source())


@lru_cache
def get_analysis_provider() -> AnalysisProvider:
    return TemplateAnalysisProvider(get_rate_provider(), rng=_random_source())


@lru_cache
def get_ledger() -> Ledger:
    return Ledger(get_rate_provider(), initial_balance=get_settings().initial_balance)
