"""
CoinFlex asset/market resolver.

CoinFlex publishes assets and markets as two independent lists. A market
only names its two assets by integer id, so canonical symbols come from
joining the lists:

    assets/   [{"id": 1, "name": "XBT", "spot_name": "BTC", ...}, ...]
    markets/  [{"name": "XBT-USD", "base": 1, "counter": 2, "expires": ...}, ...]

    -> Market(id="XBT-USD", symbol="BTC/USD", base_id=1, quote_id=2, ...)

The currency name of an asset is its ``spot_name`` when set, else its
``name``; that name is then passed through the injected currency-code
function. A market whose ``expires`` time (epoch ms) lies in the past is
inactive.
"""

from typing import Any, Callable, Dict, List, Mapping, Sequence

import structlog
from pydantic import ValidationError

from marketfeed.exceptions import AssetNotFoundError, InvalidResponseError
from marketfeed.models.market import AssetRecord, Market, MarketRecord, PreparedAsset

logger = structlog.get_logger(__name__)

PreparedAssetIndex = Dict[int, PreparedAsset]


def prepare_assets(assets: Sequence[Mapping[str, Any]]) -> PreparedAssetIndex:
    """
    Index assets by id.

    Duplicate ids are not an error; the last entry wins.

    Args:
        assets: Raw asset list.

    Returns:
        PreparedAssetIndex: asset id -> PreparedAsset.

    Raises:
        InvalidResponseError: If an asset entry is malformed.
    """
    index: PreparedAssetIndex = {}
    for raw in assets:
        try:
            record = AssetRecord.model_validate(raw)
        except ValidationError as e:
            logger.error("asset_record_invalid", exchange="coinflex", asset=raw, error=str(e))
            raise InvalidResponseError(f"Invalid CoinFlex asset: {e}") from e
        index[record.id] = PreparedAsset(
            name=record.name,
            spot_name=record.spot_name,
            spot_id=record.spot_id,
            scale=record.scale,
        )
    return index


def is_active(expires: int | None, now_ms: int) -> bool:
    """A market is active unless it has an expiry and now is past it."""
    return expires is None or now_ms <= expires


def resolve_markets(
    assets: Sequence[Mapping[str, Any]],
    markets: Sequence[Mapping[str, Any]],
    now_ms: int,
    currency_code: Callable[[str], str],
) -> List[Market]:
    """
    Join raw assets and markets into canonical markets.

    Args:
        assets: Raw asset list from ``assets/``.
        markets: Raw market list from ``markets/``.
        now_ms: Current time in epoch milliseconds.
        currency_code: Maps a venue currency name to its canonical code.

    Returns:
        List[Market]: One market per input market, in input order. Markets
        mapping to the same symbol are all returned.

    Raises:
        AssetNotFoundError: If a market references an unknown asset id.
        InvalidResponseError: If an asset or market entry is malformed.

    Example:
        >>> resolve_markets(
        ...     [{"id": 1, "name": "BTC"}, {"id": 2, "name": "USD"}],
        ...     [{"name": "BTC-USD", "base": 1, "counter": 2}],
        ...     now_ms=0,
        ...     currency_code=str.upper,
        ... )[0].symbol
        'BTC/USD'
    """
    prepared_assets = prepare_assets(assets)
    info = {
        "assets": assets,
        "markets": markets,
        "prepared_assets": {
            asset_id: asset.model_dump() for asset_id, asset in prepared_assets.items()
        },
    }

    result: List[Market] = []
    for raw in markets:
        try:
            record = MarketRecord.model_validate(raw)
        except ValidationError as e:
            logger.error("market_record_invalid", exchange="coinflex", market=raw, error=str(e))
            raise InvalidResponseError(f"Invalid CoinFlex market: {e}") from e

        base_asset = prepared_assets.get(record.base)
        if base_asset is None:
            logger.error(
                "market_asset_not_found",
                exchange="coinflex",
                market=record.name,
                asset_id=record.base,
                side="base",
            )
            raise AssetNotFoundError(record.base, record.name)

        quote_asset = prepared_assets.get(record.counter)
        if quote_asset is None:
            logger.error(
                "market_asset_not_found",
                exchange="coinflex",
                market=record.name,
                asset_id=record.counter,
                side="quote",
            )
            raise AssetNotFoundError(record.counter, record.name)

        base = currency_code(base_asset.code_name)
        quote = currency_code(quote_asset.code_name)

        try:
            market = Market(
                id=record.name,
                symbol=f"{base}/{quote}",
                base=base,
                quote=quote,
                base_id=record.base,
                quote_id=record.counter,
                active=is_active(record.expires, now_ms),
                info=info,
            )
        except ValidationError as e:
            logger.error(
                "market_record_invalid",
                exchange="coinflex",
                market=raw,
                base=base,
                quote=quote,
                error=str(e),
            )
            raise InvalidResponseError(
                f"Invalid CoinFlex market {record.name!r} ({base!r}/{quote!r}): {e}"
            ) from e
        result.append(market)

    logger.debug(
        "markets_resolved",
        exchange="coinflex",
        assets_count=len(prepared_assets),
        markets_count=len(result),
    )

    return result
