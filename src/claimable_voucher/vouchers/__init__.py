from .issuer import ClaimableVoucher
from .constants import (
    SIGNING_DOMAIN_NAME,
    SIGNING_DOMAIN_VERSION,
    RINKEBY_CHAIN_ID,
    MAX_UINT256,
    NO_EXPIRY,
)
from .standards import (
    SigningDomain,
    NFTVoucherMessage,
    TypedData,
    NFT_VOUCHER_TYPES,
)
from .schemas import (
    VoucherFields,
    SignedVoucher,
    VoucherVerificationResult,
    to_uint256,
)
from .signers import (
    TypedDataSigner,
    LocalAccountSigner,
    ProviderSigner,
)
from .verifies import (
    hash_voucher,
    recover_voucher_signer,
    verify_voucher,
    assert_voucher_valid,
)

__all__ = [
    "ClaimableVoucher",
    "SIGNING_DOMAIN_NAME",
    "SIGNING_DOMAIN_VERSION",
    "RINKEBY_CHAIN_ID",
    "MAX_UINT256",
    "NO_EXPIRY",
    "SigningDomain",
    "NFTVoucherMessage",
    "TypedData",
    "NFT_VOUCHER_TYPES",
    "VoucherFields",
    "SignedVoucher",
    "VoucherVerificationResult",
    "to_uint256",
    "TypedDataSigner",
    "LocalAccountSigner",
    "ProviderSigner",
    "hash_voucher",
    "recover_voucher_signer",
    "verify_voucher",
    "assert_voucher_valid",
]
