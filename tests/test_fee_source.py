"""
Tests for the fee rate source.
"""

from __future__ import annotations

import httpx
import pytest

from datatypes.fee_rate import FeeRate, FeeRateSet, FeeTier
from fees.source import (
    FeeOracleBadResponse,
    FeeOracleUnreachable,
    FeeRateSource,
    FeeSourceUnavailable,
    RecommendedFees,
)
from tests.factories import FEE_API_URL, RECOMMENDED_FEES, RecordingTransport


def source_answering(response: httpx.Response) -> tuple[FeeRateSource, RecordingTransport]:
    transport = RecordingTransport(lambda request: response)
    return FeeRateSource(url=FEE_API_URL, client=httpx.Client(transport=transport)), transport


class TestOverride:
    """Tests for the override branch."""

    def test_override_sets_every_tier(
        self, fee_source: FeeRateSource, fee_oracle: RecordingTransport
    ) -> None:
        rates = fee_source.resolve(50)
        assert {tier: rate.sats_vB for tier, rate in rates.items()} == {
            tier: 50 for tier in FeeTier
        }
        assert fee_oracle.requests == []

    def test_zero_override(self, fee_source: FeeRateSource) -> None:
        assert fee_source.resolve(0) == FeeRateSet.uniform(0)

    def test_negative_override(
        self, fee_source: FeeRateSource, fee_oracle: RecordingTransport
    ) -> None:
        with pytest.raises(ValueError):
            fee_source.resolve(-1)
        assert fee_oracle.requests == []


class TestFeeOracle:
    """Tests for the request to the fee oracle."""

    def test_parses_the_five_tiers(
        self, fee_source: FeeRateSource, fee_oracle: RecordingTransport
    ) -> None:
        rates = fee_source.resolve()
        assert rates[FeeTier.FASTEST] == FeeRate(25)
        assert rates[FeeTier.HALF_HOUR] == FeeRate(20)
        assert rates[FeeTier.HOUR] == FeeRate(15)
        assert rates[FeeTier.ECONOMY] == FeeRate(8)
        assert rates[FeeTier.MINIMUM] == FeeRate(4)
        assert len(fee_oracle.requests) == 1
        assert fee_oracle.requests[0].method == "GET"
        assert str(fee_oracle.requests[0].url) == FEE_API_URL

    def test_missing_field(self) -> None:
        body = {k: v for k, v in RECOMMENDED_FEES.items() if k != "economyFee"}
        source, _ = source_answering(httpx.Response(200, json=body))
        with pytest.raises(FeeOracleBadResponse):
            source.resolve()

    def test_non_integer_field(self) -> None:
        source, _ = source_answering(
            httpx.Response(200, json={**RECOMMENDED_FEES, "hourFee": "fast"})
        )
        with pytest.raises(FeeSourceUnavailable):
            source.resolve()

    def test_fractional_field(self) -> None:
        source, _ = source_answering(
            httpx.Response(200, json={**RECOMMENDED_FEES, "minimumFee": 1.5})
        )
        with pytest.raises(FeeOracleBadResponse):
            source.resolve()

    def test_not_json(self) -> None:
        source, _ = source_answering(httpx.Response(200, text="<html>busy</html>"))
        with pytest.raises(FeeOracleBadResponse):
            source.resolve()

    def test_http_error_status(self) -> None:
        source, transport = source_answering(httpx.Response(503, text="unavailable"))
        with pytest.raises(FeeOracleUnreachable):
            source.resolve()
        assert len(transport.requests) == 1

    def test_transport_error_is_not_retried(self) -> None:
        calls: list[httpx.Request] = []

        def refuse(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        source = FeeRateSource(
            url=FEE_API_URL, client=httpx.Client(transport=httpx.MockTransport(refuse))
        )
        with pytest.raises(FeeSourceUnavailable) as excinfo:
            source.resolve()
        assert isinstance(excinfo.value, FeeOracleUnreachable)
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
        assert str(excinfo.value).startswith("Could not receive fee rates.")
        assert len(calls) == 1

    def test_timeout(self) -> None:
        def time_out(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        source = FeeRateSource(
            url=FEE_API_URL, client=httpx.Client(transport=httpx.MockTransport(time_out))
        )
        with pytest.raises(FeeOracleUnreachable):
            source.resolve()


class TestRecommendedFees:
    """Tests for the fee oracle response model."""

    def test_to_fee_rates(self) -> None:
        fees = RecommendedFees.model_validate(RECOMMENDED_FEES)
        assert fees.half_hour_fee == 20
        assert fees.to_fee_rates()[FeeTier.HALF_HOUR] == FeeRate(20)

    def test_extra_fields_are_ignored(self) -> None:
        fees = RecommendedFees.model_validate({**RECOMMENDED_FEES, "nextBlockFee": 30})
        assert fees.fastest_fee == 25
