"""
Metadata enrichment for freshly minted tokens.
Combines the Helius token metadata API with the on-chain mint account.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from chain_client import ChainClient
from errors import UpstreamError, UpstreamRateLimited
from models import MintState, TokenInfo
from rate_limit import backoff_delay

logger = logging.getLogger("metadata_fetcher")

DEFAULT_API_BASE = "https://api.helius.xyz"


def _to_float(x) -> Optional[float]:
    try:
        return float(x) if x is not None else None
    except (TypeError, ValueError):
        return None


def _positive(x) -> Optional[float]:
    value = _to_float(x)
    return value if value else None


def resolve_token_address(event: Dict[str, Any]) -> Optional[str]:
    """Mint field first, then the first account, then the signature."""
    accounts = event.get("accounts") or []
    return event.get("tokenMint") or (accounts[0] if accounts else None) or event.get("signature")


class EstimateStrategy:
    """
    Source of liquidity / market cap / price when the metadata API has none.
    Swap in a real pool-data implementation without touching the filters.
    """

    def liquidity(self, supply: float) -> Optional[float]:
        raise NotImplementedError

    def market_cap(self, supply: float) -> Optional[float]:
        raise NotImplementedError

    def launch_price(self, supply: float) -> Optional[float]:
        raise NotImplementedError


class SupplyEstimator(EstimateStrategy):
    """
    Placeholder estimates derived from token supply only.
    These are rough approximations, not market data.
    """
    LIQUIDITY_SHARE = 0.01          # 1% of supply counted as liquidity
    BASE_PRICE_SOL = 0.000005       # assumed launch price

    def liquidity(self, supply: float) -> Optional[float]:
        return supply * self.LIQUIDITY_SHARE

    def market_cap(self, supply: float) -> Optional[float]:
        return supply * self.BASE_PRICE_SOL

    def launch_price(self, supply: float) -> Optional[float]:
        return self.BASE_PRICE_SOL


def _metadata_name(metadata: Dict[str, Any]) -> Optional[str]:
    if metadata.get("name"):
        return metadata["name"]
    on_chain = ((metadata.get("onChainMetadata") or {}).get("metadata") or {}).get("data") or {}
    legacy = metadata.get("legacyMetadata") or {}
    name = on_chain.get("name") or legacy.get("name")
    if name:
        # on-chain names are padded with NUL bytes
        return name.rstrip("\x00").strip() or None
    return None


class MetadataFetcher:
    """
    Builds TokenInfo records for mint addresses.
    Retries rate-limited and failed calls with exponential backoff.
    """

    def __init__(self, session: aiohttp.ClientSession, chain: ChainClient, api_key: str,
                 api_base: str = DEFAULT_API_BASE, max_attempts: int = 3,
                 retry_base_delay: float = 1.0, estimator: EstimateStrategy = None):
        self.session = session
        self.chain = chain
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self.estimator = estimator or SupplyEstimator()

    async def fetch_for_event(self, event: Dict[str, Any]) -> Optional[TokenInfo]:
        return await self.fetch(resolve_token_address(event))

    async def fetch(self, address: Optional[str]) -> Optional[TokenInfo]:
        """
        Fetches and merges metadata for a token.

        Args:
            address: token mint address

        Returns:
            TokenInfo, or None when no address was given or every attempt failed
        """
        if not address:
            return None

        for attempt in range(1, self.max_attempts + 1):
            try:
                metadata = await self._fetch_metadata(address)
                mint_state = await self.chain.get_mint_state(address)
                token = self.build_token_info(address, metadata, mint_state)
                logger.info(f"Fetched token data for {address}: {token}")
                return token
            except UpstreamRateLimited:
                logger.warning(f"Rate limit hit for {address} (attempt {attempt}/{self.max_attempts})")
            except Exception as e:
                logger.error(f"Error extracting token info for {address} (attempt {attempt}/{self.max_attempts}): {e}")

            if attempt < self.max_attempts:
                delay = backoff_delay(attempt, self.retry_base_delay)
                logger.info(f"Retrying {address} after {delay:.1f}s...")
                await asyncio.sleep(delay)

        logger.error(f"Giving up on {address} after {self.max_attempts} attempts")
        return None

    async def _fetch_metadata(self, address: str) -> Dict[str, Any]:
        url = f"{self.api_base}/v0/tokens/metadata"
        async with self.session.post(url, params={"api-key": self.api_key},
                                     json={"mintAccounts": [address]}) as response:
            if response.status == 429:
                raise UpstreamRateLimited(url)
            if response.status != 200:
                body = await response.text()
                raise UpstreamError(f"Helius API error: {response.status} - {body}", status=response.status)
            data = await response.json()

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        return {}

    def build_token_info(self, address: str, metadata: Dict[str, Any], mint_state: MintState) -> TokenInfo:
        supply = mint_state.ui_supply

        liquidity = _positive(metadata.get("liquidity"))
        if liquidity is None:
            liquidity = _positive(self.estimator.liquidity(supply))

        market_cap = _positive(metadata.get("marketCap"))
        if market_cap is None:
            market_cap = _positive(self.estimator.market_cap(supply))

        launch_price = _positive(metadata.get("price"))
        if launch_price is None:
            launch_price = _positive(self.estimator.launch_price(supply))

        return TokenInfo(
            address=address,
            name=_metadata_name(metadata) or f"Token_{address[:8]}",
            liquidity=liquidity,
            market_cap=market_cap,
            dev_holding=_positive(metadata.get("devHolding")),
            pool_supply=_positive(metadata.get("poolSupply")),
            launch_price=launch_price,
            mint_auth_revoked=bool(metadata.get("mintAuthorityRevoked")) or mint_state.mint_authority_revoked,
            freeze_auth_revoked=bool(metadata.get("freezeAuthorityRevoked")) or mint_state.freeze_authority_revoked,
        )
