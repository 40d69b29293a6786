"""Non-custodial Cross-Chain Swap Example.

This example walks the full swap flow with a local test wallet standing in
for the user's browser wallet:
- The service prepares the order and returns a message to sign
- The wallet signs it (the service never sees the private key)
- The service verifies the signature, submits the order and reveals
  secrets as the escrows deploy

Prerequisites:
1. pip install stablecenter-sdk
2. Set FUSION_AUTH_KEY (and optionally FUSION_API_URL, FUSION_SOURCE,
   FUSION_PRESET) in the environment or a .env file
3. Set WALLET_PRIVATE_KEY to a funded wallet, and approve the printed
   spender for the source token before the order can fill

Usage:
    python secure_swap.py
"""

import asyncio
import os
from dotenv import load_dotenv

load_dotenv()


async def main():
    from eth_account import Account

    from stablecenter_sdk import (
        OrderParams,
        SecureSwapService,
        SignedOrderRequest,
        load_config_from_env,
        sign_swap_message,
    )

    private_key = os.environ.get("WALLET_PRIVATE_KEY")
    if not private_key or not os.environ.get("FUSION_AUTH_KEY"):
        print("Missing required environment variables: FUSION_AUTH_KEY, WALLET_PRIVATE_KEY")
        return

    wallet = Account.from_key(private_key).address
    config = load_config_from_env()

    print("=" * 60)
    print("  NON-CUSTODIAL CROSS-CHAIN SWAP")
    print("=" * 60)

    async with SecureSwapService({"auth_key": config.auth_key, "api_url": config.api_url}) as service:
        # 1 USDC from Ethereum to Base
        params = OrderParams(amount="1000000", src_chain_id=1, dst_chain_id=8453)

        print("\n[1] Preparing order...")
        prepared = await service.prepare_order(params, wallet)
        print(f"    Quote: {prepared.quote.src_token_amount} -> {prepared.quote.dst_token_amount}")
        print(f"    Secrets required: {prepared.quote.required_secret_count}")

        print("\n[2] Signing authorization in the wallet...")
        print("-" * 60)
        print(prepared.message_to_sign)
        print("-" * 60)
        signature = sign_swap_message(private_key, prepared.message_to_sign)

        print("\n[3] Submitting signed order...")
        submitted = await service.submit_signed_order(
            SignedOrderRequest(
                preparation_hash=prepared.preparation_hash,
                user_wallet_address=wallet,
                signature=signature,
                timestamp=prepared.timestamp,
                nonce=prepared.nonce,
            )
        )
        print(f"    Order hash: {submitted.order_hash}")
        if submitted.approval_info:
            print(f"    Approve {submitted.approval_info.amount} of "
                  f"{submitted.approval_info.token_address}")
            print(f"    for spender {submitted.approval_info.spender_address}")

        print("\n[4] Monitoring until completion (Ctrl+C to stop, resume later)...")
        final = await service.monitor_order(
            submitted.order_hash,
            submitted.secrets,
            secret_hashes=submitted.secret_hashes,
            timeout=30 * 60,
        )

        print(f"\n[5] Order {final.status}")
        for fill in final.fills:
            print(f"    Fill TX: {fill.tx_hash}")


if __name__ == "__main__":
    asyncio.run(main())
