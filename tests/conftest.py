import pytest
from pycardano import Address, Asset, AssetName, MultiAsset, Network, ScriptHash, VerificationKeyHash

from txout_app.utils.cardano import dict_to_datum


@pytest.fixture
def address():
    return Address(payment_part=VerificationKeyHash(b"\x01" * 28), network=Network.TESTNET)


@pytest.fixture
def policy():
    return ScriptHash(b"\x02" * 28)


@pytest.fixture
def token_x(policy):
    ma = MultiAsset()
    ma[policy] = Asset()
    ma[policy][AssetName(b"tokenX")] = 5
    return ma


@pytest.fixture
def token_x_unit(policy):
    return policy.payload.hex() + b"tokenX".hex()


@pytest.fixture
def datum_payload():
    return dict_to_datum({"name": "NerdsWifLambo", "ticker": "NwifLAMBO", "decimals": 6, "version": 2})
