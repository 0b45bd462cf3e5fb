from .vouchers import (
    ClaimableVoucher,
    SigningDomain,
    SignedVoucher,
    VoucherFields,
    TypedDataSigner,
    LocalAccountSigner,
    ProviderSigner,
    verify_voucher,
    RINKEBY_CHAIN_ID,
)
from .engine.exceptions import (
    VoucherError,
    InvalidVoucherFieldError,
    VoucherSigningError,
    SignatureVerificationError,
    ConfigurationError,
)

__all__ = [
    "ClaimableVoucher",
    "SigningDomain",
    "SignedVoucher",
    "VoucherFields",
    "TypedDataSigner",
    "LocalAccountSigner",
    "ProviderSigner",
    "verify_voucher",
    "RINKEBY_CHAIN_ID",
    "VoucherError",
    "InvalidVoucherFieldError",
    "VoucherSigningError",
    "SignatureVerificationError",
    "ConfigurationError",
]
