"""
Signing Capability Tests

- LocalAccountSigner: address derivation, chain id, env loading
- ProviderSigner: eth_signTypedData_v4 request shape, error responses,
  chain id from the connected node, interchangeability with local signing
"""

import json
import os
from unittest.mock import patch

import pytest

from test_mocks import (
    MOCK_CHAIN_ID_SEPOLIA,
    MOCK_SIGNER_ADDRESS,
    MOCK_SIGNER_PRIVATE_KEY,
    MockAsyncWeb3,
    create_domain,
    create_issuer,
    create_signer,
)

from claimable_voucher.engine.exceptions import ConfigurationError, VoucherSigningError
from claimable_voucher.vouchers import (
    LocalAccountSigner,
    NFT_VOUCHER_TYPES,
    ProviderSigner,
    recover_voucher_signer,
)


class TestLocalAccountSigner:

    def test_address(self):
        assert create_signer().address == MOCK_SIGNER_ADDRESS

    def test_empty_key_raises(self):
        with pytest.raises(ConfigurationError):
            LocalAccountSigner("")

    @pytest.mark.asyncio
    async def test_chain_id(self):
        assert await create_signer().get_chain_id() is None
        assert await create_signer(chain_id=5).get_chain_id() == 5

    @pytest.mark.asyncio
    async def test_signature_shape(self):
        signature = await create_signer().sign_typed_data(
            create_domain(), NFT_VOUCHER_TYPES, {"tokenId": 1, "nonce": 1, "expiry": 0}
        )
        assert signature.startswith("0x")
        assert len(signature) == 132
        assert int(signature[-2:], 16) in (27, 28)

    def test_from_env(self):
        with patch.dict(os.environ, {"VOUCHER_SIGNER_PRIVATE_KEY": MOCK_SIGNER_PRIVATE_KEY}):
            signer = LocalAccountSigner.from_env(chain_id=3)
        assert signer.address == MOCK_SIGNER_ADDRESS
        assert signer.chain_id == 3

    def test_repr_hides_key(self):
        assert MOCK_SIGNER_PRIVATE_KEY[2:] not in repr(create_signer())


class TestProviderSigner:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        w3 = MockAsyncWeb3()
        signer = ProviderSigner(w3, MOCK_SIGNER_ADDRESS.lower())

        await signer.sign_typed_data(create_domain(), NFT_VOUCHER_TYPES, {"tokenId": 9, "nonce": 8, "expiry": 7})

        method, params = w3.provider.requests[0]
        typed_data = json.loads(params[1])
        assert method == "eth_signTypedData_v4"
        assert params[0] == MOCK_SIGNER_ADDRESS
        assert typed_data["primaryType"] == "NFTVoucher"
        assert [f["name"] for f in typed_data["types"]["EIP712Domain"]] == [
            "name", "version", "chainId", "verifyingContract",
        ]
        assert typed_data["domain"]["chainId"] == "4"
        assert typed_data["message"] == {"tokenId": "9", "nonce": "8", "expiry": "7"}

    @pytest.mark.asyncio
    async def test_large_integers_survive_javascript_json(self):
        w3 = MockAsyncWeb3(js_numbers=True)
        issuer = create_issuer(signer=ProviderSigner(w3, MOCK_SIGNER_ADDRESS))

        voucher = await issuer.create_voucher(2**64 + 1, 2**60 + 3, 2**53 + 1)

        typed_data = json.loads(w3.provider.requests[0][1][1])
        assert typed_data["message"]["tokenId"] == "18446744073709551617"
        assert recover_voucher_signer(voucher, await issuer.signing_domain()) == MOCK_SIGNER_ADDRESS

    @pytest.mark.asyncio
    async def test_matches_local_signing(self):
        domain = create_domain()
        message = {"tokenId": 1, "nonce": 1, "expiry": 0}

        remote = await ProviderSigner(MockAsyncWeb3(), MOCK_SIGNER_ADDRESS).sign_typed_data(
            domain, NFT_VOUCHER_TYPES, message
        )
        local = await create_signer().sign_typed_data(domain, NFT_VOUCHER_TYPES, message)

        assert remote == local

    @pytest.mark.asyncio
    async def test_issuer_takes_chain_id_from_node(self):
        signer = ProviderSigner(MockAsyncWeb3(chain_id=MOCK_CHAIN_ID_SEPOLIA), MOCK_SIGNER_ADDRESS)
        issuer = create_issuer(signer=signer, chain_id=None)

        voucher = await issuer.create_voucher(11, 12)
        domain = await issuer.signing_domain()

        assert domain.chainId == MOCK_CHAIN_ID_SEPOLIA
        assert recover_voucher_signer(voucher, domain) == MOCK_SIGNER_ADDRESS

    @pytest.mark.asyncio
    async def test_error_response_raises(self):
        w3 = MockAsyncWeb3(error={"code": 4001, "message": "User rejected the request."})
        issuer = create_issuer(signer=ProviderSigner(w3, MOCK_SIGNER_ADDRESS))

        with pytest.raises(VoucherSigningError, match="User rejected") as exc_info:
            await issuer.create_voucher(1, 1)
        assert exc_info.value.code == 4001

    @pytest.mark.asyncio
    async def test_rejects_multiple_primary_types(self):
        signer = ProviderSigner(MockAsyncWeb3(), MOCK_SIGNER_ADDRESS)
        types = dict(NFT_VOUCHER_TYPES, Other=[{"name": "x", "type": "uint256"}])
        with pytest.raises(ValueError):
            await signer.sign_typed_data(create_domain(), types, {})
