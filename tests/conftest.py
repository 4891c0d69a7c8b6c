"""
Shared fixtures for the fee estimator tests.
"""

from __future__ import annotations

import httpx
import pytest

from fees.source import FeeRateSource
from tests.factories import FEE_API_URL, RECOMMENDED_FEES, RecordingTransport


@pytest.fixture
def fee_oracle() -> RecordingTransport:
    """Fee oracle answering with RECOMMENDED_FEES."""
    return RecordingTransport(lambda request: httpx.Response(200, json=RECOMMENDED_FEES))


@pytest.fixture
def fee_source(fee_oracle: RecordingTransport) -> FeeRateSource:
    return FeeRateSource(url=FEE_API_URL, client=httpx.Client(transport=fee_oracle))
