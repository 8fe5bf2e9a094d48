#!/usr/bin/env python3
"""
Example of using PaymentClient with network configuration.
"""
import os
import logging

from pay402_sdk import (
    PaymentClient,
    NetworkConfig,
    PaymentServiceError
)

def main():
    """
    Demonstrate usage of the PaymentClient with network-based configuration.

    This example shows how to:
    1. List the bundled network profiles
    2. Initialize the client from a network name
    3. Fetch a protected resource, paying if the server asks for it
    4. Ask a paid agent a question through the escrow contract
    """
    logging.basicConfig(level=logging.INFO)

    # Read environment variables
    PRIVATE_KEY = os.environ.get("PAY402_PRIVATE_KEY")
    NETWORK = os.environ.get("PAY402_NETWORK", "mantle-testnet")
    RESOURCE_SLUG = os.environ.get("RESOURCE_SLUG", "weather")
    AGENT_SLUG = os.environ.get("AGENT_SLUG", "assistant")

    # Verify configuration
    if not PRIVATE_KEY:
        print("ERROR: PAY402_PRIVATE_KEY environment variable is required")
        return

    # Available networks
    print("Available networks:")
    for network_name in NetworkConfig.load_networks().keys():
        print(f"  - {network_name}")
    print()

    client = PaymentClient.from_network(network=NETWORK, private_key=PRIVATE_KEY)
    client.ledger.assert_chain_id(client.config.expected_chain_id())
    print(f"Connected to network: {NETWORK}")
    print(f"Payer address: {client.address}")

    try:
        print(f"Fetching resource '{RESOURCE_SLUG}'...")
        content = client.fetch_protected_resource(RESOURCE_SLUG)
        print(f"Content: {content}")

        print(f"Asking agent '{AGENT_SLUG}' through escrow...")
        reply = client.fetch_agent_reply_escrow(AGENT_SLUG, "What is the capital of France?")
        print(f"Reply: {reply}")

    except PaymentServiceError as e:
        print(f"Error [{e.category.value}]: {e}")
        if e.tx_hash:
            print(f"Payment transaction: {NetworkConfig.tx_url(NETWORK, e.tx_hash) or e.tx_hash}")

if __name__ == "__main__":
    main()
