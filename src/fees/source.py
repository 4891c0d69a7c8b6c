"""Resolution of the market fee rates a transaction is projected at.

Includes the following:
    - FeeSourceUnavailable (exception): the fee rates couldn't be obtained.
    - FeeOracleUnreachable (exception): the fee oracle couldn't be reached.
    - FeeOracleBadResponse (exception): the fee oracle answered with data not
        holding the five fee tiers.
    - RecommendedFees (class): the fee oracle response.
    - FeeRateSource (class): resolves the rates from an override or from the
        fee oracle.
"""
from __future__ import annotations

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from datatypes.fee_rate import FeeRateSet, FeeTier
from errors import FestivusError

LOGGER = structlog.stdlib.get_logger(__name__)

DEFAULT_FEE_API_URL = "https://mempool.space/api/v1/fees/recommended"
DEFAULT_TIMEOUT = 10.0


class FeeSourceUnavailable(FestivusError):
    """Raise when the fee rates can't be retrieved from the fee oracle."""

    def __str__(self) -> str:
        detail = super().__str__()
        message = "Could not receive fee rates."
        return f"{message} {detail}" if detail else message


class FeeOracleUnreachable(FeeSourceUnavailable):
    """Raise when the request to the fee oracle fails."""


class FeeOracleBadResponse(FeeSourceUnavailable):
    """Raise when the fee oracle response lacks any of the fee tiers."""


class RecommendedFees(BaseModel):
    """The recommended fee rates, in sats per vbyte, as served by mempool.space."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    fastest_fee: int = Field(alias=FeeTier.FASTEST.value, ge=0)
    half_hour_fee: int = Field(alias=FeeTier.HALF_HOUR.value, ge=0)
    hour_fee: int = Field(alias=FeeTier.HOUR.value, ge=0)
    economy_fee: int = Field(alias=FeeTier.ECONOMY.value, ge=0)
    minimum_fee: int = Field(alias=FeeTier.MINIMUM.value, ge=0)

    def to_fee_rates(self) -> FeeRateSet:
        return FeeRateSet(
            {
                FeeTier.FASTEST: self.fastest_fee,
                FeeTier.HALF_HOUR: self.half_hour_fee,
                FeeTier.HOUR: self.hour_fee,
                FeeTier.ECONOMY: self.economy_fee,
                FeeTier.MINIMUM: self.minimum_fee,
            }
        )


class FeeRateSource:
    """Provide the fee rates of the five fee tiers.

    Rates come from the override when there is one, in which case the fee
    oracle is never contacted. Otherwise a single GET request is made to the
    fee oracle, without retries.

    Args:
        url: the fee oracle endpoint.
        timeout: seconds to wait for the fee oracle.
        client: an httpx client to make the request with. If not set, a client
            is created and closed around the request.
    """

    def __init__(
        self,
        url: str = DEFAULT_FEE_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.client = client

    def resolve(self, override: int | None = None) -> FeeRateSet:
        """Get the fee rate of every fee tier.

        Args:
            override: if set, the fee rate in sats per vbyte for all the tiers.

        Raises:
            FeeSourceUnavailable: if the fee oracle fails or returns bad data.
            ValueError: if the override is not a valid fee rate.
        """
        if override is not None:
            LOGGER.debug(f"Using fee rate override of {override} sat/vB.")
            return FeeRateSet.uniform(override)
        return self.fetch().to_fee_rates()

    def fetch(self) -> RecommendedFees:
        """Request the recommended fee rates to the fee oracle."""
        LOGGER.info("Requesting fee rates", url=self.url)
        if self.client is not None:
            response = self._get(self.client)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = self._get(client)

        try:
            fees = RecommendedFees.model_validate_json(response.content)
        except ValidationError as e:
            LOGGER.error(
                "Fee oracle response is malformed",
                url=self.url,
                errors=e.error_count(),
            )
            raise FeeOracleBadResponse(
                f"{e.error_count()} invalid fields in response from {self.url}"
            ) from e

        LOGGER.debug("Fee rates received", **fees.model_dump(by_alias=True))
        return fees

    def _get(self, client: httpx.Client) -> httpx.Response:
        try:
            response = client.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            LOGGER.error(f"Fee oracle request failed: {e}", url=self.url)
            raise FeeOracleUnreachable(str(e)) from e
        return response
