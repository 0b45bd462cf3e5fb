from dataclasses import dataclass
from typing import Dict, Any, List

from .constants import VOUCHER_PRIMARY_TYPE


# -----------------------------
# EIP-712 Domain
# -----------------------------

EIP712_DOMAIN_FIELDS: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


@dataclass(frozen=True)
class SigningDomain:
    """
    EIP-712 domain separator inputs.
    Used to bind a voucher signature to one protocol, contract and chain.

    All four fields must equal the values the verifying contract hashes
    internally, otherwise every signature fails on-chain.
    """
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


# -----------------------------
# NFTVoucher
# -----------------------------

#: Field order and type names are part of the wire contract.
NFT_VOUCHER_FIELDS: List[Dict[str, str]] = [
    {"name": "tokenId", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "expiry", "type": "uint256"},
]

#: ``types`` argument handed to a signer (``EIP712Domain`` is implied).
NFT_VOUCHER_TYPES: Dict[str, List[Dict[str, str]]] = {
    VOUCHER_PRIMARY_TYPE: NFT_VOUCHER_FIELDS,
}


@dataclass(frozen=True)
class NFTVoucherMessage:
    """
    The unsigned voucher payload.

    Attributes:
        tokenId: Id of the token to mint or claim (uint256).
        nonce: Single-use replay-protection value (uint256).
        expiry: Bound after which the voucher is rejected; 0 means never (uint256).
    """
    tokenId: int
    nonce: int
    expiry: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokenId": self.tokenId,
            "nonce": self.nonce,
            "expiry": self.expiry,
        }


# -----------------------------
# Typed data (eth_signTypedData_v4)
# -----------------------------

def _is_integer_type(type_name: str) -> bool:
    return type_name.startswith("uint") or type_name.startswith("int")


def _stringify_integers(fields: List[Dict[str, str]], values: Dict[str, Any]) -> Dict[str, Any]:
    encoded = dict(values)
    for member in fields:
        name = member["name"]
        if _is_integer_type(member["type"]) and isinstance(encoded.get(name), int):
            encoded[name] = str(encoded[name])
    return encoded


@dataclass
class TypedData:
    """
    Container for a single-primary-type EIP-712 structure.

    ``to_dict()`` yields the ``{types, primaryType, domain, message}`` layout
    accepted by ``eth_signTypedData_v4``. Integer members are rendered as
    decimal strings: JSON-RPC signers written in JavaScript or Go parse JSON
    numbers as doubles, which cannot hold a uint256 above ``2**53``.

    Attributes:
        domain: SigningDomain describing the verifying contract and chain.
        types: Struct definitions excluding ``EIP712Domain``; exactly one entry.
        message: Values of the primary struct.
    """
    domain: SigningDomain
    types: Dict[str, List[Dict[str, str]]]
    message: Dict[str, Any]

    def __post_init__(self):
        if len(self.types) != 1:
            raise ValueError(f"Expected exactly one primary type, got {sorted(self.types)}")

    @property
    def primary_type(self) -> str:
        return next(iter(self.types))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": {"EIP712Domain": list(EIP712_DOMAIN_FIELDS), **self.types},
            "primaryType": self.primary_type,
            "domain": _stringify_integers(EIP712_DOMAIN_FIELDS, self.domain.to_dict()),
            "message": _stringify_integers(self.types[self.primary_type], self.message),
        }
