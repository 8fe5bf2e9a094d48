#!/usr/bin/env python3
"""
Pay in native currency, then retry a request with the payment header.
"""
import os

import requests

from pay402_sdk import PaymentClient, PaymentData

PRIVATE_KEY = os.environ.get("PAY402_PRIVATE_KEY")
RECIPIENT = os.environ.get("RECIPIENT_ADDRESS")
URL = os.environ.get("PROTECTED_URL", "http://localhost:3000/premium")


def main():
    if not PRIVATE_KEY or not RECIPIENT:
        print("ERROR: PAY402_PRIVATE_KEY and RECIPIENT_ADDRESS are required")
        return

    client = PaymentClient.from_network(network="localhost", private_key=PRIVATE_KEY)

    def retry(headers):
        response = requests.get(URL, headers=headers, timeout=30)
        response.raise_for_status()
        return response.json()

    # 0.001 native units, in wei
    result = client.pay_and_retry(
        PaymentData(amount=str(10**15), recipient=RECIPIENT),
        retry
    )
    print(result)


if __name__ == "__main__":
    main()
