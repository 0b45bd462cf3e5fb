"""
Voucher Protocol Constants and Configuration

Holds the EIP-712 domain constants shared with the verifying contract, the
uint256 bounds every voucher field is checked against, and the
environment-aware getters used to configure an issuer without hard-coding
addresses, chain ids or keys.
"""

import os
from typing import Optional

import dotenv

from ..engine.exceptions import ConfigurationError

dotenv.load_dotenv()

# ---------------------------------------------------------------------------
# EIP-712 domain constants
# ---------------------------------------------------------------------------

#: Domain ``name``; must match the string the verifying contract hashes.
SIGNING_DOMAIN_NAME: str = "Webaverse-voucher"

#: Domain ``version``; must match the verifying contract.
SIGNING_DOMAIN_VERSION: str = "1"

#: Primary EIP-712 type name of a voucher.
VOUCHER_PRIMARY_TYPE: str = "NFTVoucher"

#: Chain id of the legacy Rinkeby deployment. Exported for callers that
#: must stay byte-compatible with that contract; never applied implicitly.
RINKEBY_CHAIN_ID: int = 4

# ---------------------------------------------------------------------------
# Solidity integer bounds
# ---------------------------------------------------------------------------

MAX_UINT256: int = 2**256 - 1

#: Expiry value meaning "never expires".
NO_EXPIRY: int = 0


def get_contract_address_from_env() -> Optional[str]:
    """
    Load the verifying contract address from environment variables.

    Environment Variable:
        - VOUCHER_CONTRACT_ADDRESS: 0x-prefixed address of the claim contract

    Returns:
        str: Address from environment, or None if not configured
    """
    return os.getenv("VOUCHER_CONTRACT_ADDRESS")


def get_chain_id_from_env() -> Optional[int]:
    """
    Load the target chain id from environment variables.

    Environment Variable:
        - VOUCHER_CHAIN_ID: Decimal chain id (e.g. ``1`` Mainnet, ``11155111`` Sepolia)

    Returns:
        int: Chain id from environment, or None if not configured

    Raises:
        ConfigurationError: If the variable is set but is not a positive integer.
    """
    raw = os.getenv("VOUCHER_CHAIN_ID")
    if raw is None or raw.strip() == "":
        return None
    try:
        chain_id = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"VOUCHER_CHAIN_ID must be an integer, got {raw!r}")
    if chain_id <= 0:
        raise ConfigurationError(f"VOUCHER_CHAIN_ID must be positive, got {chain_id}")
    return chain_id


def get_private_key_from_env() -> Optional[str]:
    """
    Load the voucher signer private key from environment variables.

    Only in-process signers read this; production deployments are expected
    to hand the issuer a remote signer instead.

    Environment Variable:
        - VOUCHER_SIGNER_PRIVATE_KEY: 0x-prefixed hex secp256k1 key

    Returns:
        str: Private key from environment, or None if not configured

    Example:
        # In your .env file or environment setup:
        # export VOUCHER_SIGNER_PRIVATE_KEY="0x1234567890abcdef..."
    """
    return os.getenv("VOUCHER_SIGNER_PRIVATE_KEY")
