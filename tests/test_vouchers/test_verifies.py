import pytest

from test_mocks import (
    MOCK_CHAIN_ID_SEPOLIA,
    MOCK_EXPIRY_FUTURE,
    MOCK_EXPIRY_PAST,
    MOCK_OTHER_ADDRESS,
    MOCK_OTHER_CONTRACT_ADDRESS,
    MOCK_SIGNER_ADDRESS,
    create_domain,
    create_issuer,
)

from claimable_voucher.engine.exceptions import SignatureVerificationError
from claimable_voucher.schemas.bases import VerificationStatus
from claimable_voucher.vouchers import (
    SignedVoucher,
    assert_voucher_valid,
    recover_voucher_signer,
    verify_voucher,
)


@pytest.fixture
def domain():
    return create_domain()


class TestVerifyVoucher:

    @pytest.mark.asyncio
    async def test_valid_voucher(self, domain):
        voucher = await create_issuer().create_voucher(1, 1, MOCK_EXPIRY_FUTURE)

        result = verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS, current_time=MOCK_EXPIRY_FUTURE - 1)

        assert result.is_success()
        assert result.signer == MOCK_SIGNER_ADDRESS
        assert result.get_error_message() is None

    @pytest.mark.asyncio
    async def test_no_expiry_never_expires(self, domain):
        voucher = await create_issuer().create_voucher(1, 1)
        result = verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS, current_time=2**64)
        assert result.is_success()

    @pytest.mark.asyncio
    async def test_expired_voucher(self, domain):
        voucher = await create_issuer().create_voucher(1, 1, MOCK_EXPIRY_PAST)

        result = verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS, current_time=MOCK_EXPIRY_PAST)

        assert result.status == VerificationStatus.EXPIRED
        assert not result.is_success()
        assert "expired" in result.get_error_message()

    @pytest.mark.asyncio
    async def test_used_nonce(self, domain):
        voucher = await create_issuer().create_voucher(1, 5)
        result = verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS, used_nonces={4, 5})
        assert result.status == VerificationStatus.REPLAY_ATTACK

    @pytest.mark.asyncio
    async def test_wrong_signer(self, domain):
        voucher = await create_issuer().create_voucher(1, 1)

        result = verify_voucher(voucher, domain, MOCK_OTHER_ADDRESS)

        assert result.status == VerificationStatus.INVALID_SIGNATURE
        assert result.signer == MOCK_SIGNER_ADDRESS
        assert result.error_details["expected"] == MOCK_OTHER_ADDRESS

    @pytest.mark.asyncio
    async def test_signer_comparison_is_case_insensitive(self, domain):
        voucher = await create_issuer().create_voucher(1, 1)
        assert verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS.lower()).is_success()

    @pytest.mark.asyncio
    async def test_tampered_fields(self, domain):
        voucher = await create_issuer().create_voucher(1, 1)
        tampered = voucher.model_copy(update={"tokenId": 2})

        result = verify_voucher(tampered, domain, MOCK_SIGNER_ADDRESS)

        assert result.status == VerificationStatus.INVALID_SIGNATURE

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "other_domain",
        [
            create_domain(contract_address=MOCK_OTHER_CONTRACT_ADDRESS),
            create_domain(chain_id=MOCK_CHAIN_ID_SEPOLIA),
        ],
    )
    async def test_domain_mismatch_is_rejected(self, other_domain):
        voucher = await create_issuer().create_voucher(1, 1)
        result = verify_voucher(voucher, other_domain, MOCK_SIGNER_ADDRESS)
        assert result.status == VerificationStatus.INVALID_SIGNATURE

    def test_unrecoverable_signature(self, domain):
        voucher = SignedVoucher(tokenId=1, nonce=1, signature="0x" + ("00" * 31 + "01") * 2 + "1d")

        result = verify_voucher(voucher, domain, MOCK_SIGNER_ADDRESS)

        assert result.status == VerificationStatus.INVALID_SIGNATURE
        assert result.signer is None
        with pytest.raises(SignatureVerificationError):
            recover_voucher_signer(voucher, domain)

    def test_every_status_is_reachable(self):
        # Each status maps to one check in verify_voucher; no catch-all value.
        assert {status.value for status in VerificationStatus} == {
            "success", "invalid_signature", "expired", "replay_attack",
        }


class TestAssertVoucherValid:

    @pytest.mark.asyncio
    async def test_passes(self, domain):
        voucher = await create_issuer().create_voucher(3, 3)
        assert assert_voucher_valid(voucher, domain, MOCK_SIGNER_ADDRESS).is_success()

    @pytest.mark.asyncio
    async def test_raises(self, domain):
        voucher = await create_issuer().create_voucher(3, 3)
        with pytest.raises(SignatureVerificationError, match="not signed by the authorized signer"):
            assert_voucher_valid(voucher, domain, MOCK_OTHER_ADDRESS)
