"""
Voucher Schema Models

Pydantic models for vouchers as they leave the issuer and travel to
whatever submits the redeeming transaction. All classes inherit from the
base schema hierarchy in ``schemas.bases``.

    - VoucherFields: The unsigned ``{tokenId, nonce, expiry}`` payload.
    - SignedVoucher: VoucherFields plus the 65-byte EIP-712 signature.
    - VoucherVerificationResult: Outcome of off-chain verification.

``to_uint256`` is the single normalizer every numeric field passes through,
so a Python ``int``, an ``__index__``-capable big integer and a decimal or
hex string all reach the signer as the same canonical ``int``.
"""

import operator
import re
from typing import Any, Literal, Optional

from eth_utils import to_bytes
from pydantic import ConfigDict, Field, field_validator

from ..engine.exceptions import InvalidVoucherFieldError
from ..schemas.bases import BaseVerificationResult, CanonicalModel
from .constants import MAX_UINT256, NO_EXPIRY
from .standards import NFTVoucherMessage

# ASCII digits only, no sign, underscores or whitespace inside the number.
_UINT_STRING = re.compile(r"0[xX][0-9a-fA-F]+|[0-9]+")


def to_uint256(name: str, value: Any) -> int:
    """
    Normalize ``value`` to an ``int`` in ``[0, 2**256 - 1]``.

    Accepted inputs:
        - ``int`` and any object implementing ``__index__`` (e.g. ``gmpy2.mpz``)
        - decimal strings (``"42"``) and 0x-prefixed hex strings (``"0x2a"``)

    ``bool`` and ``float`` are rejected even though Python would coerce them,
    so that a stray ``True`` or ``1e3`` never silently becomes a token id.

    Args:
        name:  Field name, used in the error message.
        value: Candidate value.

    Returns:
        The canonical integer.

    Raises:
        InvalidVoucherFieldError: If the value is not representable as uint256.
    """
    if isinstance(value, bool):
        raise InvalidVoucherFieldError(name, value, "booleans are not integers")

    if isinstance(value, str):
        text = value.strip()
        if not _UINT_STRING.fullmatch(text):
            raise InvalidVoucherFieldError(name, value, "not a decimal or 0x-hex integer string")
        if len(text) > 80:
            raise InvalidVoucherFieldError(name, value, "exceeds the uint256 range")
        number = int(text, 16) if text[:2].lower() == "0x" else int(text, 10)
    else:
        try:
            number = operator.index(value)
        except TypeError:
            raise InvalidVoucherFieldError(
                name, value, f"expected an integer, got {type(value).__name__}"
            )

    if number < 0:
        raise InvalidVoucherFieldError(name, value, "must be non-negative")
    if number > MAX_UINT256:
        raise InvalidVoucherFieldError(name, value, "exceeds the uint256 range")
    return number


class VoucherFields(CanonicalModel):
    """
    Unsigned voucher payload.

    Attributes:
        tokenId: Id of the token to be minted or claimed.
        nonce: Single-use value; the verifying contract rejects it once consumed.
        expiry: Time/block bound after which the voucher is rejected; ``0`` never expires.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tokenId: int = Field(..., description="Token id (uint256)")
    nonce: int = Field(..., description="Replay-protection nonce (uint256)")
    expiry: int = Field(default=NO_EXPIRY, description="Expiry bound (uint256); 0 means no expiry")

    @field_validator("tokenId", "nonce", "expiry", mode="before")
    @classmethod
    def check_uint256(cls, value: Any, info) -> int:
        return to_uint256(info.field_name, value)

    def to_message(self) -> NFTVoucherMessage:
        return NFTVoucherMessage(tokenId=self.tokenId, nonce=self.nonce, expiry=self.expiry)


class SignedVoucher(VoucherFields):
    """
    A voucher ready to be redeemed on-chain.

    The signature is an EIP-712 signature over every other field, encoded
    as the 65-byte ``r || s || v`` hex string that Solidity's ``ECDSA.recover``
    accepts. Instances are immutable; validity is decided solely by the
    verifying contract at redemption time.

    Example::

        voucher = await issuer.create_voucher(1, 1)
        payload = voucher.to_canonical_json()
        # '{"expiry":0,"nonce":1,"signature":"0x...","tokenId":1}'
        assert SignedVoucher.from_json(payload) == voucher
    """

    signature: str = Field(..., description="0x-prefixed 65-byte signature (r || s || v)")

    @field_validator("signature", mode="before")
    @classmethod
    def check_signature(cls, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        if not isinstance(value, str):
            raise ValueError(f"signature must be a hex string or bytes, got {type(value).__name__}")
        hex_str = value[2:] if value[:2].lower() == "0x" else value
        if len(hex_str) != 130:
            raise ValueError(f"signature must be 65 bytes (130 hex chars), got {len(hex_str)} chars")
        try:
            int(hex_str, 16)
        except ValueError:
            raise ValueError("signature is not valid hexadecimal")
        return "0x" + hex_str.lower()

    @classmethod
    def from_json(cls, data: str) -> "SignedVoucher":
        return cls.model_validate_json(data)

    def unsigned(self) -> VoucherFields:
        return VoucherFields(tokenId=self.tokenId, nonce=self.nonce, expiry=self.expiry)

    def signature_bytes(self) -> bytes:
        return to_bytes(hexstr=self.signature)

    def vrs(self) -> tuple:
        """Split the packed signature into ``(v, r, s)`` integers."""
        raw = self.signature_bytes()
        return raw[64], int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:64], "big")


class VoucherVerificationResult(BaseVerificationResult):
    """
    Outcome of verifying a SignedVoucher off-chain.

    Attributes:
        verification_type: Literal identifier (``"NFTVoucher"``).
        signer: Address recovered from the signature when recovery succeeded.
        expected_signer: Address the voucher was required to be signed by.
        token_id: Voucher token id, echoed for logging.
        nonce: Voucher nonce, echoed for logging.
    """

    verification_type: Literal["NFTVoucher"] = Field(default="NFTVoucher", description="Verification type identifier")
    signer: Optional[str] = Field(None, description="Recovered signer address")
    expected_signer: str = Field(..., description="Authorized signer address")
    token_id: int = Field(..., ge=0, description="Voucher token id")
    nonce: int = Field(..., ge=0, description="Voucher nonce")
