from enum import IntEnum
from pathlib import Path

import governance

#
# Filesystem
#

GOVERNANCE_DIR = Path(governance.__file__).parent
PROPOSAL_PARAMS_DIR = GOVERNANCE_DIR / "proposal_params"
ARTIFACTS_DIR = GOVERNANCE_DIR / "artifacts"

#
# Networks
#

RONIN_MAINNET = "ronin-mainnet"
RONIN_TESTNET = "ronin-testnet"
ETHEREUM = "ethereum"
GOERLI = "goerli"

RONIN_NETWORKS = [RONIN_MAINNET, RONIN_TESTNET]

CHAIN_IDS = {
    RONIN_MAINNET: 2020,
    RONIN_TESTNET: 2021,
    ETHEREUM: 1,
    GOERLI: 5,
}

# mainchain network -> ronin network it bridges to
NETWORK_MAPPING = {
    ETHEREUM: RONIN_MAINNET,
    GOERLI: RONIN_TESTNET,
}

#
# Type hashes
#

# keccak256("ProposalDetail(uint256 nonce,uint256 chainId,address[] targets,uint256[] values,bytes[] calldatas,uint256[] gasAmounts)")
PROPOSAL_TYPE_HASH = bytes.fromhex(
    "65526afa953b4e935ecd640e6905741252eedae157e79c37331ee8103c70019d"
)
# keccak256("GlobalProposalDetail(uint256 nonce,uint256 chainId,uint8[] targetOptions,uint256[] values,bytes[] calldatas,uint256[] gasAmounts)")
GLOBAL_PROPOSAL_TYPE_HASH = bytes.fromhex(
    "a5addc7e195836105eeda9b1ad78194fd4b815fc260b77a66ffa21e88f295ffb"
)
# keccak256("Ballot(bytes32 proposalHash,uint8 support)")
BALLOT_TYPE_HASH = bytes.fromhex(
    "d900570327c4c0df8dd6bdd522b7da7e39145dd049d2fd4602276adcd511e3c2"
)
# keccak256("WeightedAddress(address addr,uint256 weight)")
WEIGHTED_ADDRESS_TYPE_HASH = bytes.fromhex(
    "3c66f1bc9d050034ff93d3e3e70ae387ab531ac77189aecbb153fb8b2f25816e"
)
# keccak256("BridgeOperatorsBallot(uint256 period,WeightedAddress[] operators)WeightedAddress(address addr,uint256 weight)")
BRIDGE_OPERATORS_BALLOT_TYPE_HASH = bytes.fromhex(
    "c619a891fd1ff5098212f6991adf7c8b51f579fa8bc67828211bb4b5661ac1a0"
)
# keccak256("TokenInfo(uint8 erc,uint256 id,uint256 quantity)")
TOKEN_INFO_TYPE_HASH = bytes.fromhex(
    "1e2b74b2a792d5c0f0b6e59b037fa9d43d84fbb759337f0112fcc15ca414fc8d"
)
# keccak256("TokenOwner(address addr,address tokenAddr,uint256 chainId)")
TOKEN_OWNER_TYPE_HASH = bytes.fromhex(
    "353bdd8d69b9e3185b3972e08b03845c0c14a21a390215302776a7a34b0e8764"
)
# keccak256("Receipt(uint256 id,uint8 kind,TokenOwner mainchain,TokenOwner ronin,TokenInfo info)TokenInfo(uint8 erc,uint256 id,uint256 quantity)TokenOwner(address addr,address tokenAddr,uint256 chainId)")
RECEIPT_TYPE_HASH = bytes.fromhex(
    "b9d1fe7c9deeec5dc90a2f47ff1684239519f2545b2228d3d91fb27df3189eea"
)

# EIP-191 version byte 0x01 (structured data)
EIP712_PREFIX = b"\x19\x01"

#
# Domains
#

GOVERNANCE_ADMIN_DOMAIN_NAME = "GovernanceAdmin"
GOVERNANCE_ADMIN_DOMAIN_VERSION = "1"
GOVERNANCE_ADMIN_SALT_NAME = "RONIN_GOVERNANCE_ADMIN"
GOVERNANCE_ADMIN_SALT_CHAIN_ID = 2020

BRIDGE_ADMIN_DOMAIN_NAME = "BridgeAdmin"
BRIDGE_ADMIN_DOMAIN_VERSION = "2"
BRIDGE_ADMIN_SALT_NAME = "BRIDGE_ADMIN"

#
# Proposals
#

DEFAULT_GAS_AMOUNT = 2_000_000
UPGRADE_GAS_AMOUNT = 500_000

FUNCTION_DELEGATE_CALL_SIGNATURE = "functionDelegateCall(bytes)"
UPGRADE_TO_SIGNATURE = "upgradeTo(address)"

GOVERNANCE_CONTRACTS = ["RoninGovernanceAdmin", "RoninBridgeManager", "MainchainBridgeManager"]

# round(0) holds the nonce space of chain-agnostic proposals
GLOBAL_PROPOSAL_CHAIN_ID = 0

UINT256_MAX = 2**256 - 1


class VoteType(IntEnum):
    FOR = 0
    AGAINST = 1


class VoteStatus(IntEnum):
    PENDING = 0
    APPROVED = 1
    EXECUTED = 2
    REJECTED = 3
    EXPIRED = 4


class TargetOption(IntEnum):
    NONE = 0
    GATEWAY_CONTRACT = 1
    BRIDGE_REWARD = 2
    BRIDGE_SLASH = 3
    BRIDGE_TRACKING = 4


class TokenStandard(IntEnum):
    ERC20 = 0
    ERC721 = 1


class ReceiptKind(IntEnum):
    DEPOSIT = 0
    WITHDRAWAL = 1
