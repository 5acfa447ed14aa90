import pytest

from v3sim.tokens import default_registry
from v3sim.univ3_pool import make_v3_pool


@pytest.fixture
def tokens():
    return default_registry()


@pytest.fixture
def eth_usdc_pool(tokens):
    return make_v3_pool(
        "WETH-USDC-0.3",
        tokens.get("WETH"),
        tokens.get("USDC"),
        mid_price=3000.0,
        fee=0.003,
        tick_spacing=60,
        volume_24h_usd=1_250_000.0,
    )
