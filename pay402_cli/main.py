"""
Command-line entry point for the pay402 SDK.

Usage:
    pay402 resource SLUG [--escrow]
    pay402 agent SLUG MESSAGE [--escrow]
    pay402 address
    pay402 networks
"""
import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from pay402_sdk import PaymentClient, NetworkConfig, ServiceConfig, __version__
from pay402_sdk.config import DEFAULT_API_BASE_URL
from pay402_sdk.exceptions import ErrorCategory, PaymentServiceError

EXIT_OK = 0
EXIT_CODES = {
    ErrorCategory.CONFIGURATION: 2,
    ErrorCategory.TRANSPORT: 3,
    ErrorCategory.UNEXPECTED_STATUS: 4,
    ErrorCategory.MALFORMED_CHALLENGE: 5,
    ErrorCategory.PAYMENT_FAILED: 6,
    ErrorCategory.RETRY_REJECTED: 7,
    ErrorCategory.UNKNOWN: 1,
}

logger = logging.getLogger("pay402")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pay402",
        description="Fetch 402-protected resources and pay for them on-chain."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--network",
        help="Network name (default: $PAY402_NETWORK or mantle)"
    )
    parser.add_argument(
        "--rpc-url",
        help="Override the network RPC URL"
    )
    parser.add_argument(
        "--base-url",
        help=f"Override the API base URL (default: {DEFAULT_API_BASE_URL})"
    )
    parser.add_argument(
        "--private-key",
        help="Payer private key (default: $PAY402_PRIVATE_KEY)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resource = subparsers.add_parser("resource", help="Fetch a protected resource")
    resource.add_argument("slug", help="Resource slug")
    resource.add_argument("--escrow", action="store_true", help="Pay through the escrow contract")

    agent = subparsers.add_parser("agent", help="Send a chat message to an agent")
    agent.add_argument("slug", help="Agent slug")
    agent.add_argument("message", help="Message to send")
    agent.add_argument("--escrow", action="store_true", help="Pay through the escrow contract")

    subparsers.add_parser("address", help="Print the payer address")
    subparsers.add_parser("networks", help="List supported networks")

    return parser


def _print_json(data: Any) -> None:
    if isinstance(data, str):
        print(data)
    else:
        print(json.dumps(data, indent=2, sort_keys=True))


def run(args: argparse.Namespace) -> int:
    if args.command == "networks":
        _print_json({
            name: {"name": net["name"], "chainId": net["chainId"], "rpc": net["rpc"]}
            for name, net in NetworkConfig.load_networks().items()
        })
        return EXIT_OK

    config = ServiceConfig.from_env(
        private_key=args.private_key,
        network=args.network,
        rpc_url=args.rpc_url,
        api_base_url=args.base_url,
    )
    client = PaymentClient(config)

    if args.command == "address":
        print(client.address)
        return EXIT_OK

    if args.command == "resource":
        if args.escrow:
            result = client.fetch_protected_resource_escrow(args.slug)
        else:
            result = client.fetch_protected_resource(args.slug)
    else:
        if args.escrow:
            result = client.fetch_agent_reply_escrow(args.slug, args.message)
        else:
            result = client.fetch_agent_reply(args.slug, args.message)

    _print_json(result)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        return run(args)
    except PaymentServiceError as e:
        print(f"Error [{e.category.value}]: {e}", file=sys.stderr)
        if e.tx_hash:
            print(f"Payment transaction: {e.tx_hash}", file=sys.stderr)
        if e.funds_spent:
            print("Funds may have been spent; no content was returned.", file=sys.stderr)
        return EXIT_CODES[e.category]


if __name__ == "__main__":
    sys.exit(main())
