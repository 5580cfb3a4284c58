import pytest
from eth_account import Account
from hexbytes import HexBytes

from governance.constants import ARTIFACTS_DIR, PROPOSAL_PARAMS_DIR, TargetOption
from governance.proposal import GlobalProposalDetail, ProposalDetail, WeightedAddress

# Common constants
RONIN_TESTNET_CHAIN_ID = 2021
PROPOSAL_HASH_ONE = HexBytes(b"\x00" * 31 + b"\x01")

TARGET = "0x" + "11" * 20
IMPLEMENTATION = "0x" + "22" * 20
OPERATOR_A = "0x" + "aa" * 20
OPERATOR_B = "0x" + "bb" * 20

# upgradeTo(0x2222222222222222222222222222222222222222)
UPGRADE_TO_CALLDATA = HexBytes("0x3659cfe6" + "00" * 12 + "22" * 20)

VOTER_KEYS = [
    "0x" + "01" * 32,
    "0x" + "02" * 32,
    "0x" + "03" * 32,
]


# Fixtures
@pytest.fixture(scope="session")
def registry_filepath():
    return ARTIFACTS_DIR / "ronin-testnet.json"


@pytest.fixture(scope="session")
def local_params_filepath():
    return PROPOSAL_PARAMS_DIR / "ronin-testnet" / "upgrade-gateway.yml"


@pytest.fixture(scope="session")
def global_params_filepath():
    return PROPOSAL_PARAMS_DIR / "ronin-testnet" / "global-bridge-reward.yml"


@pytest.fixture()
def empty_proposal():
    return ProposalDetail(
        nonce=1,
        chain_id=RONIN_TESTNET_CHAIN_ID,
        targets=[],
        values=[],
        calldatas=[],
        gas_amounts=[],
    )


@pytest.fixture()
def upgrade_proposal():
    return ProposalDetail(
        nonce=3,
        chain_id=RONIN_TESTNET_CHAIN_ID,
        targets=[TARGET],
        values=[0],
        calldatas=[UPGRADE_TO_CALLDATA],
        gas_amounts=[500_000],
    )


@pytest.fixture()
def two_instruction_proposal():
    return ProposalDetail(
        nonce=4,
        chain_id=RONIN_TESTNET_CHAIN_ID,
        targets=[TARGET, IMPLEMENTATION],
        values=[0, 1],
        calldatas=[UPGRADE_TO_CALLDATA, HexBytes("0x8456cb59")],
        gas_amounts=[500_000, 2_000_000],
    )


@pytest.fixture()
def global_proposal():
    return GlobalProposalDetail(
        nonce=2,
        chain_id=0,
        target_options=[TargetOption.GATEWAY_CONTRACT, TargetOption.BRIDGE_REWARD],
        values=[0, 0],
        calldatas=[UPGRADE_TO_CALLDATA, HexBytes("0x8456cb59")],
        gas_amounts=[500_000, 2_000_000],
    )


@pytest.fixture()
def operators():
    return [WeightedAddress(OPERATOR_A, 10), WeightedAddress(OPERATOR_B, 20)]


@pytest.fixture(scope="session")
def voters():
    return [Account.from_key(key) for key in VOTER_KEYS]
