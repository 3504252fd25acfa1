import pytest

from filters import passes, rejection_reason
from models import FilterConfig

from conftest import make_token


@pytest.mark.parametrize("missing", ["liquidity", "dev_holding", "pool_supply", "launch_price"])
def test_missing_required_field_never_passes(missing):
    token = make_token(**{missing: None})
    assert passes(token, FilterConfig()) is False
    assert rejection_reason(token, FilterConfig()) == f"missing {missing}"


def test_missing_field_rejected_even_with_wide_open_filters():
    filters = FilterConfig()
    for name in ("liquidity", "pool_supply", "dev_holding", "launch_price"):
        filters.set_range(name, float("-inf"), float("inf"))
    assert passes(make_token(pool_supply=None), filters) is False


def test_token_inside_all_ranges_passes():
    assert passes(make_token(), FilterConfig()) is True


def test_bounds_are_inclusive():
    filters = FilterConfig()
    at_min = make_token(liquidity=4000, pool_supply=60, dev_holding=2, launch_price=0.0000000022)
    at_max = make_token(liquidity=25000, pool_supply=95, dev_holding=10, launch_price=0.0000000058)
    assert passes(at_min, filters)
    assert passes(at_max, filters)


def test_value_outside_range_fails():
    assert rejection_reason(make_token(liquidity=25000.01), FilterConfig()) == "liquidity"
    assert rejection_reason(make_token(dev_holding=1.5), FilterConfig()) == "dev_holding"


def test_unrequired_authority_flags_do_not_matter():
    token = make_token(mint_auth_revoked=False, freeze_auth_revoked=False)
    assert passes(token, FilterConfig(mint_auth_revoked=False, freeze_auth_revoked=False))


def test_required_authority_revocation_is_enforced():
    filters = FilterConfig(mint_auth_revoked=True, freeze_auth_revoked=True)
    assert passes(make_token(), filters)
    assert rejection_reason(make_token(mint_auth_revoked=False), filters) == "mint_auth_revoked"
    assert rejection_reason(make_token(freeze_auth_revoked=False), filters) == "freeze_auth_revoked"


def test_set_range_rejects_inverted_bounds_without_mutating():
    filters = FilterConfig()
    with pytest.raises(ValueError):
        filters.set_range("liquidity", 25000, 4000)
    assert (filters.liquidity.min, filters.liquidity.max) == (4000, 25000)


def test_describe_formats_edited_and_default_bounds_alike():
    filters = FilterConfig()
    filters.set_range("liquidity", 5000.0, 20000.0)

    text = filters.describe()

    assert "Liquidity: 5000-20000" in text
    assert "Pool Supply: 60-95%" in text
    assert "Launch Price: 0.0000000022-0.0000000058 SOL" in text
