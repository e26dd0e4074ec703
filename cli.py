#!/usr/bin/env python3
"""Command-line driver for the Fusion+ order lifecycle"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any, List, Optional

from app.cache import TTLCache
from app.config import settings
from app.core.fusion import (
    ChainResourceCache,
    CreatedOrder,
    FusionError,
    FusionOrderManager,
    SigningAdapter,
    SwapIntent,
)
from app.core.fusion.constants import CHAIN_NAMES, COMMON_TOKENS
from app.core.fusion.units import from_base_units, to_base_units
from app.logging_config import setup_logging
from app.providers.oneinch import OneInchFusionProvider

PRIVATE_KEY_ENV = "FUSION_PRIVATE_KEY"


def build_manager() -> FusionOrderManager:
    settings.require_api_key()
    return FusionOrderManager(
        provider=OneInchFusionProvider(),
        signer=SigningAdapter(ChainResourceCache(settings.rpc_urls)),
        token_cache=TTLCache(default_ttl=settings.token_list_cache_ttl_seconds),
    )


def resolve_private_key(explicit: Optional[str]) -> str:
    key = explicit or os.environ.get(PRIVATE_KEY_ENV, "")
    if not key:
        raise SystemExit(f"❌ A private key is required (--private-key or {PRIVATE_KEY_ENV})")
    return key


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def chain_label(chain_id: int) -> str:
    name = CHAIN_NAMES.get(chain_id)
    return f"{name} ({chain_id})" if name else str(chain_id)


def print_created(created: CreatedOrder) -> None:
    order = created.unsigned.order
    print("\n🧾 Order ready for signing")
    print("=" * 50)
    print(f"Quote ID:     {created.quote_id}")
    print(f"Preset:       {created.preset} ({created.secrets_count} secret hashes)")
    print(f"Maker:        {order.maker}")
    print(f"Making:       {order.making_amount} of {order.maker_asset}")
    print(f"Taking:       {order.taking_amount} of {order.taker_asset}")
    print(f"Contract:     {created.unsigned.verifying_contract}")
    if created.quote and created.quote.dst_token_amount:
        print(f"Est. output:  {created.quote.dst_token_amount}")


def intent_from_args(args: argparse.Namespace) -> SwapIntent:
    return SwapIntent(
        from_chain_id=args.from_chain,
        to_chain_id=args.to_chain,
        src_token=args.src_token,
        dst_token=args.dst_token,
        amount=args.amount,
        wallet_address=args.wallet,
        receiver=getattr(args, "receiver", None),
        preset=getattr(args, "preset", None),
    )


async def cli_quote(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    print(f"🔍 Requesting quote {chain_label(args.from_chain)} → {chain_label(args.to_chain)} for {args.amount}...")
    print_json(await manager.get_quote(intent_from_args(args)))


async def cli_create(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    created = await manager.create_order(intent_from_args(args))
    print_created(created)
    if args.json:
        print_json(created.to_response())


async def cli_swap(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    """Create, sign locally and submit in one go."""
    private_key = resolve_private_key(args.private_key)
    created = await manager.create_order(intent_from_args(args))
    print_created(created)

    signed = manager.sign_order(created, private_key=private_key)
    print("✍️  Order signed")
    if args.dry_run:
        print_json(signed.to_wire())
        return

    submitted = await manager.submit_order(signed)
    print(f"📤 Submitted: orderHash={submitted.order_hash}")


async def cli_status(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    print_json(await manager.get_order_status(args.order_hash, args.chain))


async def cli_cancel(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    private_key = resolve_private_key(args.private_key)
    result = await manager.cancel_order(args.order_hash, args.chain, private_key=private_key)
    print("🛑 Cancellation submitted")
    print_json(result)


async def cli_active(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    print_json(await manager.get_active_orders(args.maker, args.chain, limit=args.limit, offset=args.offset))


async def cli_validate(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    result = await manager.validate_token_pair(args.from_chain, args.to_chain, args.src_token, args.dst_token)
    if result.is_valid:
        print("✅ Both tokens are supported")
        return
    for error in result.errors:
        print(f"❌ {error}")


async def cli_tokens(manager: FusionOrderManager, args: argparse.Namespace) -> None:
    if args.common:
        print_json(COMMON_TOKENS.get(str(args.chain), {}))
        return
    data = await manager.get_supported_tokens(args.chain)
    tokens = data.get("tokens", {}) if isinstance(data, dict) else {}
    print(f"🪙 {len(tokens)} tokens supported on {chain_label(args.chain)}")
    for address, info in list(tokens.items())[: args.limit]:
        symbol = info.get("symbol", "?") if isinstance(info, dict) else "?"
        print(f"  {symbol:<10} {address}")


def _add_intent_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("from_chain", type=int, help="Source chain ID")
    parser.add_argument("to_chain", type=int, help="Destination chain ID")
    parser.add_argument("src_token", help="Source token address")
    parser.add_argument("dst_token", help="Destination token address")
    parser.add_argument("amount", help="Amount in base units")
    parser.add_argument("wallet", help="Maker wallet address")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fusion+ relay CLI")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    quote_parser = subparsers.add_parser("quote", help="Fetch a cross-chain quote")
    _add_intent_arguments(quote_parser)

    for name, help_text in (("create", "Build an order ready for signing"), ("swap", "Create, sign and submit an order")):
        order_parser = subparsers.add_parser(name, help=help_text)
        _add_intent_arguments(order_parser)
        order_parser.add_argument("--preset", help="fast, medium or slow")
        order_parser.add_argument("--receiver", help="Receiver on the destination chain")
        if name == "create":
            order_parser.add_argument("--json", action="store_true", help="Print the full signing payload")
        else:
            order_parser.add_argument("--private-key", help=f"Maker key (defaults to ${PRIVATE_KEY_ENV})")
            order_parser.add_argument("--dry-run", action="store_true", help="Sign but do not submit")

    status_parser = subparsers.add_parser("status", help="Order status")
    status_parser.add_argument("order_hash")
    status_parser.add_argument("chain", type=int)

    cancel_parser = subparsers.add_parser("cancel", help="Cancel an order")
    cancel_parser.add_argument("order_hash")
    cancel_parser.add_argument("chain", type=int)
    cancel_parser.add_argument("--private-key", help=f"Maker key (defaults to ${PRIVATE_KEY_ENV})")

    active_parser = subparsers.add_parser("active", help="Active orders for a maker")
    active_parser.add_argument("maker")
    active_parser.add_argument("chain", type=int)
    active_parser.add_argument("--limit", type=int, default=10)
    active_parser.add_argument("--offset", type=int, default=0)

    validate_parser = subparsers.add_parser("validate", help="Check token support for a pair")
    validate_parser.add_argument("from_chain", type=int)
    validate_parser.add_argument("to_chain", type=int)
    validate_parser.add_argument("src_token")
    validate_parser.add_argument("dst_token")

    tokens_parser = subparsers.add_parser("tokens", help="List supported tokens")
    tokens_parser.add_argument("chain", type=int)
    tokens_parser.add_argument("--limit", type=int, default=25)
    tokens_parser.add_argument("--common", action="store_true", help="Show the curated token map only")

    to_wei_parser = subparsers.add_parser("to-wei", help="Decimal amount → base units")
    to_wei_parser.add_argument("amount")
    to_wei_parser.add_argument("decimals", nargs="?", type=int, default=18)

    from_wei_parser = subparsers.add_parser("from-wei", help="Base units → decimal amount")
    from_wei_parser.add_argument("wei")
    from_wei_parser.add_argument("decimals", nargs="?", type=int, default=18)

    return parser


COMMANDS = {
    "quote": cli_quote,
    "create": cli_create,
    "swap": cli_swap,
    "status": cli_status,
    "cancel": cli_cancel,
    "active": cli_active,
    "validate": cli_validate,
    "tokens": cli_tokens,
}


async def run(args: argparse.Namespace) -> int:
    handler = COMMANDS[args.command]
    try:
        await handler(build_manager(), args)
    except FusionError as exc:
        print(f"❌ {exc.title}: {exc.message}")
        if exc.context.payload is not None:
            print_json(exc.context.payload)
        if exc.context.suggestion:
            print(f"💡 {exc.context.suggestion}")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Pure conversions need neither the network nor an API key.
    try:
        if args.command == "to-wei":
            print(to_base_units(args.amount, args.decimals))
            return 0
        if args.command == "from-wei":
            print(from_base_units(args.wei, args.decimals))
            return 0
    except ValueError as exc:
        print(f"❌ {exc}")
        return 1

    setup_logging(args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
