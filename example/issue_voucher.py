import asyncio
import logging

from claimable_voucher import ClaimableVoucher, LocalAccountSigner, RINKEBY_CHAIN_ID, verify_voucher

logging.basicConfig(level=logging.DEBUG)

pk = "0xxxx"  # Replace with the authorized signer's key
contract = "0xxxx"  # Replace with the deployed claim contract


async def main():
    issuer = ClaimableVoucher(
        contract_address=contract,
        signer=LocalAccountSigner(pk),
        chain_id=RINKEBY_CHAIN_ID,
    )
    voucher = await issuer.create_voucher(token_id=1, nonce=1)

    result = verify_voucher(voucher, await issuer.signing_domain(), issuer.signer.address)
    print("Valid:", result.is_success())
    return voucher


if __name__ == "__main__":
    voucher = asyncio.run(main())
    print("Voucher:", voucher.to_canonical_json())
