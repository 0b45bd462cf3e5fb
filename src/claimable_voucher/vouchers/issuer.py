"""
Claimable Voucher Issuer

Creates ``NFTVoucher`` objects and signs them, to be redeemed later by the
verifying contract without an upfront transaction.

Dependencies:
    - web3.py: address validation and checksum normalization
    - eth_account (via the signer): EIP-712 signing
"""

import asyncio
import logging
from typing import Optional

from web3 import AsyncWeb3

from ..engine.exceptions import ConfigurationError
from .constants import (
    NO_EXPIRY,
    SIGNING_DOMAIN_NAME,
    SIGNING_DOMAIN_VERSION,
    get_chain_id_from_env,
    get_contract_address_from_env,
)
from .schemas import SignedVoucher, VoucherFields, to_uint256
from .signers import LocalAccountSigner, TypedDataSigner
from .standards import NFT_VOUCHER_TYPES, SigningDomain

logger = logging.getLogger(__name__)


def _normalize_contract_address(address: Optional[str]) -> str:
    if not isinstance(address, str) or not address:
        raise ConfigurationError("A verifying contract address is required")
    if not AsyncWeb3.is_address(address):
        raise ConfigurationError(f"Invalid verifying contract address: {address!r}")
    return AsyncWeb3.to_checksum_address(address)


class ClaimableVoucher:
    """
    Voucher issuer bound to one deployed verifying contract.

    The signing domain is computed on first use and cached for the lifetime
    of the instance; a different chain or contract needs a new issuer.

    Chain id resolution (first match wins):
        1. ``chain_id`` passed to the constructor
        2. ``await signer.get_chain_id()`` (the signer's bound network)
        3. the ``VOUCHER_CHAIN_ID`` environment variable

    Attributes:
        contract_address: Checksum address of the verifying contract.
        signer: Signing capability whose account is authorized on the contract.

    Example::

        signer = LocalAccountSigner("0xYOUR_PRIVATE_KEY")
        issuer = ClaimableVoucher(contract_address="0xContract", signer=signer, chain_id=RINKEBY_CHAIN_ID)
        voucher = await issuer.create_voucher(token_id=1, nonce=1)
        voucher.to_canonical_json()   # hand to the redeeming client
    """

    def __init__(
        self,
        contract_address: str,
        signer: TypedDataSigner,
        chain_id: Optional[int] = None,
    ):
        if signer is None:
            raise ConfigurationError("A signer is required")
        if chain_id is not None and (
            isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0
        ):
            raise ConfigurationError(f"chain_id must be a positive integer, got {chain_id!r}")

        self.contract_address = _normalize_contract_address(contract_address)
        self.signer = signer
        self._chain_id = chain_id
        self._domain: Optional[SigningDomain] = None
        self._domain_lock = asyncio.Lock()

    @classmethod
    def from_env(cls, signer: Optional[TypedDataSigner] = None) -> "ClaimableVoucher":
        """
        Build an issuer from ``VOUCHER_CONTRACT_ADDRESS`` and ``VOUCHER_CHAIN_ID``.

        When ``signer`` is omitted, a ``LocalAccountSigner`` is created from
        ``VOUCHER_SIGNER_PRIVATE_KEY``.
        """
        chain_id = get_chain_id_from_env()
        if signer is None:
            signer = LocalAccountSigner.from_env(chain_id=chain_id)
        return cls(
            contract_address=get_contract_address_from_env(),
            signer=signer,
            chain_id=chain_id,
        )

    async def create_voucher(self, token_id, nonce, expiry=NO_EXPIRY) -> SignedVoucher:
        """
        Create a new NFTVoucher and sign it with the configured signer.

        Args:
            token_id: Id of the token to mint or claim.
            nonce: Single-use value; once claimed it can never be used again.
            expiry: Bound after which the voucher cannot be claimed; 0 never expires.

        Returns:
            SignedVoucher with ``tokenId``, ``nonce``, ``expiry`` and ``signature``.

        Raises:
            InvalidVoucherFieldError: If a field is not a uint256.
            ConfigurationError: If no chain id can be resolved for the domain.
            Exception: Whatever the signer raises, unchanged.
        """
        fields = VoucherFields(
            tokenId=to_uint256("tokenId", token_id),
            nonce=to_uint256("nonce", nonce),
            expiry=to_uint256("expiry", expiry),
        )
        domain = await self.signing_domain()
        message = fields.to_message().to_dict()

        try:
            signature = await self.signer.sign_typed_data(domain, NFT_VOUCHER_TYPES, message)
        except Exception as e:
            logger.warning(
                "Signing failed for voucher tokenId=%s nonce=%s: %s",
                fields.tokenId, fields.nonce, e,
            )
            raise

        logger.debug("Issued voucher tokenId=%s nonce=%s expiry=%s", fields.tokenId, fields.nonce, fields.expiry)
        return SignedVoucher(**message, signature=signature)

    async def signing_domain(self) -> SigningDomain:
        """
        Return the EIP-712 signing domain, computing it once per instance.

        Concurrent first calls wait on a lock so the chain id is resolved a
        single time.
        """
        if self._domain is not None:
            return self._domain

        async with self._domain_lock:
            if self._domain is None:
                chain_id = await self._resolve_chain_id()
                self._domain = SigningDomain(
                    name=SIGNING_DOMAIN_NAME,
                    version=SIGNING_DOMAIN_VERSION,
                    chainId=chain_id,
                    verifyingContract=self.contract_address,
                )
                logger.info(
                    "Voucher signing domain set: contract=%s chainId=%s",
                    self.contract_address, chain_id,
                )
        return self._domain

    async def _resolve_chain_id(self) -> int:
        if self._chain_id is not None:
            return self._chain_id

        chain_id = await self.signer.get_chain_id()
        if chain_id is None:
            chain_id = get_chain_id_from_env()
        if chain_id is None:
            raise ConfigurationError(
                "No chain id: pass chain_id, bind the signer to a network, or set VOUCHER_CHAIN_ID"
            )
        return chain_id

    def __repr__(self) -> str:
        return f"ClaimableVoucher(contract_address={self.contract_address!r}, signer={self.signer!r})"
