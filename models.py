# Filename: models.py

from dataclasses import dataclass, field
from typing import Optional

# All-ones key the chain reports for a cleared authority
DEFAULT_PUBKEY = "11111111111111111111111111111111"

RANGE_FIELDS = ("liquidity", "pool_supply", "dev_holding", "launch_price")
FLAG_FIELDS = ("mint_auth_revoked", "freeze_auth_revoked")


@dataclass(frozen=True)
class TokenInfo:
    """
    TokenInfo is the enriched record for a freshly minted token.
    Built once per event by the metadata fetcher and consumed by filtering and alerting.
    A None numeric field means the data was not available.
    """
    address: str                              # Token mint address
    name: str                                 # Token name
    liquidity: Optional[float] = None         # USD, estimated when the API omits it
    market_cap: Optional[float] = None        # USD, estimated when the API omits it
    dev_holding: Optional[float] = None       # percent of supply
    pool_supply: Optional[float] = None       # percent of supply
    launch_price: Optional[float] = None      # SOL
    mint_auth_revoked: bool = False
    freeze_auth_revoked: bool = False


@dataclass(frozen=True)
class MintState:
    supply: int
    decimals: int
    mint_authority: Optional[str] = None
    freeze_authority: Optional[str] = None

    @property
    def ui_supply(self) -> float:
        return self.supply / 10 ** self.decimals

    @property
    def mint_authority_revoked(self) -> bool:
        return self.mint_authority in (None, "", DEFAULT_PUBKEY)

    @property
    def freeze_authority_revoked(self) -> bool:
        return self.freeze_authority in (None, "", DEFAULT_PUBKEY)


def format_number(value: float) -> str:
    """Plain decimal notation without trailing zeros: 4000, 2.5, 0.0000000022."""
    return f"{value:.12f}".rstrip("0").rstrip(".")


@dataclass
class FilterRange:
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def __str__(self) -> str:
        return f"{format_number(self.min)}-{format_number(self.max)}"


@dataclass
class FilterConfig:
    """Active alert filters. One instance per process, owned by BotState."""
    liquidity: FilterRange = field(default_factory=lambda: FilterRange(4000, 25000))
    pool_supply: FilterRange = field(default_factory=lambda: FilterRange(60, 95))
    dev_holding: FilterRange = field(default_factory=lambda: FilterRange(2, 10))
    launch_price: FilterRange = field(default_factory=lambda: FilterRange(0.0000000022, 0.0000000058))
    mint_auth_revoked: bool = False
    freeze_auth_revoked: bool = False

    def set_range(self, name: str, min_value: float, max_value: float) -> None:
        if name not in RANGE_FIELDS:
            raise KeyError(name)
        if min_value > max_value:
            raise ValueError(f"min {min_value} is greater than max {max_value}")
        # single assignment so readers never see a half-updated range
        setattr(self, name, FilterRange(min_value, max_value))

    def set_flag(self, name: str, value: bool) -> None:
        if name not in FLAG_FIELDS:
            raise KeyError(name)
        setattr(self, name, bool(value))

    def describe(self) -> str:
        return (
            f"Liquidity: {self.liquidity}\n"
            f"Pool Supply: {self.pool_supply}%\n"
            f"Dev Holding: {self.dev_holding}%\n"
            f"Launch Price: {self.launch_price} SOL\n"
            f"Mint Auth Revoked: {'Yes' if self.mint_auth_revoked else 'No'}\n"
            f"Freeze Auth Revoked: {'Yes' if self.freeze_auth_revoked else 'No'}"
        )
