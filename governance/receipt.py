from typing import NamedTuple

from eth_abi import encode
from eth_utils import keccak, to_canonical_address
from hexbytes import HexBytes

from governance.constants import RECEIPT_TYPE_HASH, TOKEN_INFO_TYPE_HASH, TOKEN_OWNER_TYPE_HASH

TOKEN_INFO_PARAM_TYPES = ["bytes32", "uint8", "uint256", "uint256"]
TOKEN_OWNER_PARAM_TYPES = ["bytes32", "address", "address", "uint256"]
RECEIPT_PARAM_TYPES = ["bytes32", "uint256", "uint8", "bytes32", "bytes32", "bytes32"]


class TokenInfo(NamedTuple):
    erc: int
    id: int
    quantity: int


class TokenOwner(NamedTuple):
    addr: str
    token_addr: str
    chain_id: int


class Receipt(NamedTuple):
    """A gateway deposit or withdrawal receipt."""

    id: int
    kind: int
    mainchain: TokenOwner
    ronin: TokenOwner
    info: TokenInfo


def hash_token_info(info: TokenInfo) -> HexBytes:
    encoded = encode(
        TOKEN_INFO_PARAM_TYPES,
        [TOKEN_INFO_TYPE_HASH, int(info.erc), info.id, info.quantity],
    )
    return HexBytes(keccak(encoded))


def hash_token_owner(owner: TokenOwner) -> HexBytes:
    encoded = encode(
        TOKEN_OWNER_PARAM_TYPES,
        [
            TOKEN_OWNER_TYPE_HASH,
            to_canonical_address(owner.addr),
            to_canonical_address(owner.token_addr),
            owner.chain_id,
        ],
    )
    return HexBytes(keccak(encoded))


def hash_receipt(receipt: Receipt) -> HexBytes:
    encoded = encode(
        RECEIPT_PARAM_TYPES,
        [
            RECEIPT_TYPE_HASH,
            receipt.id,
            int(receipt.kind),
            hash_token_owner(receipt.mainchain),
            hash_token_owner(receipt.ronin),
            hash_token_info(receipt.info),
        ],
    )
    return HexBytes(keccak(encoded))
