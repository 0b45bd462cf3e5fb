"""
Voucher Signature Verification Helpers

Off-chain mirror of the checks the verifying contract performs at
redemption time. Useful for rejecting a voucher before paying gas for a
doomed claim, and for asserting in tests that what the issuer signs is
exactly what the contract will recompute.

All cryptographic operations are performed in-process using ``eth_account``.
Nonce consumption is owned by the contract; ``verify_voucher`` only checks
a caller-supplied collection of already-used nonces.

Exported helpers
----------------
hash_voucher
    EIP-712 digest of a voucher under a domain.
recover_voucher_signer
    Address recovered from a voucher's signature.
verify_voucher
    Full check (expiry, nonce, signer) returning a result model.
assert_voucher_valid
    Strict variant of ``verify_voucher`` raising on failure.
"""

import time
from typing import Collection, Optional

from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from eth_utils import keccak

from ..engine.exceptions import SignatureVerificationError
from ..schemas.bases import VerificationStatus
from .constants import NO_EXPIRY
from .schemas import SignedVoucher, VoucherFields, VoucherVerificationResult
from .standards import NFT_VOUCHER_TYPES, SigningDomain


def _signable(voucher: VoucherFields, domain: SigningDomain) -> SignableMessage:
    return encode_typed_data(
        domain_data=domain.to_dict(),
        message_types=NFT_VOUCHER_TYPES,
        message_data=voucher.to_message().to_dict(),
    )


def hash_voucher(voucher: VoucherFields, domain: SigningDomain) -> bytes:
    """
    Compute the 32-byte EIP-712 digest the contract passes to ``ecrecover``.

    Args:
        voucher: Signed or unsigned voucher; only the three payload fields are hashed.
        domain:  Signing domain of the issuer.

    Returns:
        ``keccak256(0x19 || 0x01 || domainSeparator || hashStruct(voucher))``.
    """
    signable = _signable(voucher, domain)
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def recover_voucher_signer(voucher: SignedVoucher, domain: SigningDomain) -> str:
    """
    Recover the checksum address that signed ``voucher``.

    Raises:
        SignatureVerificationError: If the signature cannot be recovered
            (e.g. invalid ``v`` or ``s`` outside the curve order).
    """
    try:
        return Account.recover_message(_signable(voucher, domain), signature=voucher.signature_bytes())
    except Exception as e:
        raise SignatureVerificationError(f"Could not recover voucher signer: {e}") from e


def verify_voucher(
    voucher: SignedVoucher,
    domain: SigningDomain,
    expected_signer: str,
    *,
    current_time: Optional[int] = None,
    used_nonces: Optional[Collection[int]] = None,
) -> VoucherVerificationResult:
    """
    Verify a voucher the way the claim contract will.

    Performs the following checks in order, returning on the first failure:

    1. **Expiry** -- when ``expiry != 0``, ``current_time`` must be strictly
       less than ``expiry``.
    2. **Nonce** -- when ``used_nonces`` is supplied, ``nonce`` must not be in it.
    3. **ECDSA recovery** -- the address recovered from the EIP-712 digest
       must equal ``expected_signer`` (case-insensitive).

    Args:
        voucher:         SignedVoucher to check.
        domain:          Signing domain the contract uses.
        expected_signer: Authorized issuer address.
        current_time:    Unix timestamp (or block number, matching how expiry
                         is issued). Defaults to ``int(time.time())``.
        used_nonces:     Optional nonces already consumed on-chain.

    Returns:
        ``VoucherVerificationResult``; ``is_valid=True`` and ``status=SUCCESS``
        only when every check passes. Never raises for a bad voucher.
    """
    now = current_time if current_time is not None else int(time.time())
    base = dict(expected_signer=expected_signer, token_id=voucher.tokenId, nonce=voucher.nonce)

    if voucher.expiry != NO_EXPIRY and now >= voucher.expiry:
        return VoucherVerificationResult(
            status=VerificationStatus.EXPIRED,
            is_valid=False,
            message=f"Voucher expired at {voucher.expiry}",
            error_details={"expiry": voucher.expiry, "current_time": now},
            **base,
        )

    if used_nonces is not None and voucher.nonce in used_nonces:
        return VoucherVerificationResult(
            status=VerificationStatus.REPLAY_ATTACK,
            is_valid=False,
            message=f"Nonce {voucher.nonce} has already been used",
            **base,
        )

    try:
        recovered = recover_voucher_signer(voucher, domain)
    except SignatureVerificationError as e:
        return VoucherVerificationResult(
            status=VerificationStatus.INVALID_SIGNATURE,
            is_valid=False,
            message=str(e),
            **base,
        )

    if recovered.lower() != expected_signer.lower():
        return VoucherVerificationResult(
            status=VerificationStatus.INVALID_SIGNATURE,
            is_valid=False,
            message="Voucher was not signed by the authorized signer",
            signer=recovered,
            error_details={"recovered": recovered, "expected": expected_signer},
            **base,
        )

    return VoucherVerificationResult(
        status=VerificationStatus.SUCCESS,
        is_valid=True,
        message="Voucher signature is valid",
        signer=recovered,
        **base,
    )


def assert_voucher_valid(
    voucher: SignedVoucher,
    domain: SigningDomain,
    expected_signer: str,
    **kwargs,
) -> VoucherVerificationResult:
    """
    Strict variant of ``verify_voucher`` that raises on any failure.

    Raises:
        SignatureVerificationError: With the failing result's message.
    """
    result = verify_voucher(voucher, domain, expected_signer, **kwargs)
    if not result.is_success():
        raise SignatureVerificationError(result.get_error_message())
    return result
