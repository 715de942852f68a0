"""Shared fixtures for ledger reporting tests."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from factories import EUR
from ledger_reports.domain.services import ConversionPolicy


@pytest.fixture
def native_policy() -> ConversionPolicy:
    """Policy reporting native amounts with EUR as primary currency."""
    return ConversionPolicy(primary_currency=EUR)


@pytest.fixture
def rate_resolver() -> MagicMock:
    """Resolver mock returning a fixed rate of 0.5 into EUR."""
    resolver = MagicMock()
    resolver.rate.return_value = Decimal("0.5")
    return resolver


@pytest.fixture
def converting_policy(rate_resolver) -> ConversionPolicy:
    """Policy converting into EUR through the resolver mock."""
    return ConversionPolicy(
        primary_currency=EUR,
        convert_to_primary=True,
        rate_resolver=rate_resolver,
        logger=MagicMock(),
    )
