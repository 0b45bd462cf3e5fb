"""
EIP-712 Signing Capabilities

The issuer never touches key material. It delegates to a
``TypedDataSigner``, anything that can sign ``(domain, types, message)``
under EIP-712 and report the address it signs for.

Implementations
---------------
LocalAccountSigner
    In-process signing with ``eth_account``. Suited to tests, scripts and
    services that already hold the key in memory.

ProviderSigner
    Remote signing through an ``AsyncWeb3`` provider with
    ``eth_signTypedData_v4``, for node-managed accounts, wallets and
    signing services speaking JSON-RPC. The key never enters this process.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_utils import to_hex
from web3 import AsyncWeb3

from ..engine.exceptions import ConfigurationError, VoucherSigningError
from .constants import get_private_key_from_env
from .standards import SigningDomain, TypedData

logger = logging.getLogger(__name__)


class TypedDataSigner(ABC):
    """
    Abstract signing capability consumed by ``ClaimableVoucher``.

    A signer owns (or fronts) exactly one account. ``sign_typed_data`` may
    suspend on network I/O; cancellation of the awaiting task must be allowed
    to propagate into it.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address whose key produces the signatures."""

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: SigningDomain,
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        """
        Sign an EIP-712 structure.

        Args:
            domain:  Signing domain (the ``EIP712Domain`` type is implied).
            types:   Struct definitions, excluding ``EIP712Domain``; must
                     contain exactly one primary type.
            message: Values of the primary struct.

        Returns:
            0x-prefixed 65-byte ``r || s || v`` hex signature.
        """

    async def get_chain_id(self) -> Optional[int]:
        """
        Chain id of the network the signer is bound to, if it has one.

        Used by the issuer when no explicit chain id was configured.
        """
        return None


class LocalAccountSigner(TypedDataSigner):
    """
    Sign in-process with an ``eth_account`` local account.

    Attributes:
        chain_id: Optional chain id this signer is considered bound to.

    Example::

        signer = LocalAccountSigner("0xYOUR_PRIVATE_KEY", chain_id=11155111)
        sig = await signer.sign_typed_data(domain, NFT_VOUCHER_TYPES, {"tokenId": 1, "nonce": 1, "expiry": 0})
    """

    def __init__(self, private_key: str, chain_id: Optional[int] = None):
        if not private_key:
            raise ConfigurationError("Private key is required for a local signer.")
        self._account = Account.from_key(private_key)
        self.chain_id = chain_id

    @classmethod
    def from_env(cls, chain_id: Optional[int] = None) -> "LocalAccountSigner":
        private_key = get_private_key_from_env()
        if not private_key:
            raise ConfigurationError("VOUCHER_SIGNER_PRIVATE_KEY is not set")
        return cls(private_key, chain_id=chain_id)

    @property
    def address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, domain, types, message) -> str:
        signed = self._account.sign_typed_data(
            domain_data=domain.to_dict(),
            message_types=types,
            message_data=message,
        )
        return to_hex(signed.signature)

    async def get_chain_id(self) -> Optional[int]:
        return self.chain_id

    def __repr__(self) -> str:
        return f"LocalAccountSigner(address={self.address!r}, chain_id={self.chain_id!r})"


class ProviderSigner(TypedDataSigner):
    """
    Sign through a JSON-RPC node or wallet using ``eth_signTypedData_v4``.

    Args:
        w3:      ``AsyncWeb3`` connected to a provider that manages ``address``.
        address: Account the provider signs for.
    """

    def __init__(self, w3: AsyncWeb3, address: str):
        self._w3 = w3
        self._address = AsyncWeb3.to_checksum_address(address)

    @property
    def address(self) -> str:
        return self._address

    async def sign_typed_data(self, domain, types, message) -> str:
        typed_data = TypedData(domain=domain, types=types, message=message).to_dict()
        # v4 takes the typed data JSON-encoded as the second parameter.
        response = await self._w3.provider.make_request(
            "eth_signTypedData_v4", [self._address, json.dumps(typed_data)]
        )

        error = response.get("error")
        if error:
            if isinstance(error, dict):
                raise VoucherSigningError(
                    error.get("message", "eth_signTypedData_v4 failed"), code=error.get("code")
                )
            raise VoucherSigningError(str(error))

        result = response.get("result")
        if result is None:
            raise VoucherSigningError("eth_signTypedData_v4 returned no result")
        return to_hex(hexstr=result) if isinstance(result, str) else to_hex(result)

    async def get_chain_id(self) -> Optional[int]:
        chain_id = await self._w3.eth.chain_id
        logger.debug("Provider signer %s is bound to chain %s", self._address, chain_id)
        return chain_id
