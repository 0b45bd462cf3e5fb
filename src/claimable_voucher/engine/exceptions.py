"""
Exception and Error Definitions Module

Defines the exception hierarchy for voucher construction, signing and
verification. All exceptions inherit from VoucherError for unified
exception handling.

Failures raised by a signing backend itself (an ``eth_account`` error, a
cancelled task, a transport error from a web3 provider) are NOT wrapped in
this hierarchy; they reach the caller unchanged.

Exception Hierarchy:
    VoucherError (root)
    ├── InvalidVoucherFieldError
    ├── VoucherSigningError
    ├── SignatureVerificationError
    └── ConfigurationError
"""


class VoucherError(Exception):
    """
    Root exception class for all project-specific exceptions.
    """
    pass


class InvalidVoucherFieldError(VoucherError, ValueError):
    """
    Raised when a voucher field cannot be represented as a uint256.

    This includes scenarios such as:
    - Negative values
    - Values of 2**256 or more
    - Booleans, floats or unparsable strings

    Attributes:
        field: Name of the offending field (``tokenId``, ``nonce``, ``expiry``)
        value: The rejected input
    """

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class VoucherSigningError(VoucherError):
    """
    Raised when a remote signing backend answers with an error response.

    This includes scenarios such as:
    - The node does not manage the requested account
    - The wallet user rejected the signing request
    - The node does not support ``eth_signTypedData_v4``

    Attributes:
        code: JSON-RPC error code if available
    """

    def __init__(self, message: str, code=None):
        self.code = code
        super().__init__(message)


class SignatureVerificationError(VoucherError):
    """
    Raised when voucher signature verification fails in strict mode.

    This includes scenarios such as:
    - Invalid ECDSA signature
    - Signature recovered to an address other than the authorized signer
    - Tampered voucher fields
    """
    pass


class ConfigurationError(VoucherError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Malformed verifying contract address
    - No chain id given, none bound to the signer and none in the environment
    - Missing signer private key in the environment
    """
    pass
