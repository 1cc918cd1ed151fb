# -*- coding: utf-8 -*-
"""
Entry point for the wallet inspector CLI.

Commands:
    nfts <address>                  NFTs currently held (recent Transfer window)
    stats <address> [--timeframe]   activity statistics for 7d, 30d or all
    tokens <address>                non-zero ERC-20 balances
    tx <hash>                       single transaction summary
    overview <address>              balance, nonce, contract check, chain head, node status
    network                         chain head, gas prices, fee history, client and sync status
    gas --from A --to B [--value]   gas estimate and cost for a call

Results are printed to stdout as JSON; logs go to stderr.

Run with: python -m wallet_inspector.main nfts 0x...
"""
from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Sequence
from typing import Any, Optional

import structlog

from wallet_inspector.DI import Container
from wallet_inspector.exceptions import InvalidInputError, WalletInspectorError
from wallet_inspector.logging.config import configure_logging
from wallet_inspector.models import OwnershipKey, OwnershipReport, ScanWindow, WalletStatsSnapshot
from wallet_inspector.services.activity import Timeframe
from wallet_inspector.services.network import GasEstimate, GasPrices, NetworkInfo
from wallet_inspector.utils.units import parse_ether


def _jsonable(value: Any) -> Any:
    if isinstance(value, OwnershipKey):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _ownership_payload(report: OwnershipReport) -> dict[str, Any]:
    return {
        "address": report.address,
        "tokens": _jsonable(report.held_tokens),
        "excluded": [
            {"token": str(o.key), "status": o.status.value, "error": o.error}
            for o in report.excluded
        ],
        "truncated": report.truncated,
        "fetch": _jsonable(report.fetch_report),
        "degraded": report.fetch_report.degraded,
    }


def _stats_payload(snapshot: WalletStatsSnapshot) -> dict[str, Any]:
    payload = _jsonable(snapshot)
    payload.update(
        total_value_ether=str(snapshot.total_value_ether),
        total_fees_ether=str(snapshot.total_fees_ether),
        balance_ether=None if snapshot.balance_ether is None else str(snapshot.balance_ether),
        active_days=snapshot.active_days,
        average_per_day=round(snapshot.average_per_day, 2),
        wallet_age_text=snapshot.wallet_age.describe() if snapshot.wallet_age else None,
        degraded=snapshot.degraded,
    )
    return payload


def _gas_prices_payload(gas: GasPrices) -> dict[str, Any]:
    payload = _jsonable(gas)
    payload["gas_price_gwei"] = str(gas.gas_price_gwei)
    payload["max_priority_fee_gwei"] = (
        None if gas.max_priority_fee_gwei is None else str(gas.max_priority_fee_gwei)
    )
    return payload


def _network_payload(info: NetworkInfo) -> dict[str, Any]:
    payload = _jsonable(info)
    payload["gas"] = _gas_prices_payload(info.gas)
    return payload


def _gas_payload(estimate: GasEstimate) -> dict[str, Any]:
    payload = _jsonable(estimate)
    payload["gas"] = _gas_prices_payload(estimate.gas)
    payload.update(
        cost_wei=str(estimate.cost_wei),
        cost_gwei=str(estimate.cost_gwei),
        cost_ether=str(estimate.cost_ether),
    )
    return payload


def _parse_ether_arg(amount: str) -> int:
    try:
        return parse_ether(amount)
    except (ArithmeticError, ValueError) as e:
        raise InvalidInputError(f"Invalid ether amount: {amount!r}", field="value", value=amount) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallet-inspector",
        description="Inspect an EVM wallet: NFT holdings, activity stats, tokens and transactions.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override LOGGING__CONSOLE_LEVEL",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Render stderr logs as JSON lines",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    nfts = sub.add_parser("nfts", help="NFTs currently held, inferred from recent Transfer logs")
    nfts.add_argument("address")
    nfts.add_argument("--from-block", type=int, default=None)
    nfts.add_argument("--to-block", type=int, default=None)

    stats = sub.add_parser("stats", help="Activity statistics over a timeframe")
    stats.add_argument("address")
    stats.add_argument(
        "--timeframe",
        default=Timeframe.LAST_7_DAYS.value,
        choices=[t.value for t in Timeframe],
    )

    tokens = sub.add_parser("tokens", help="Non-zero ERC-20 balances")
    tokens.add_argument("address")

    tx = sub.add_parser("tx", help="Transaction summary")
    tx.add_argument("hash")

    overview = sub.add_parser("overview", help="Balance, nonce, contract check and chain head")
    overview.add_argument("address")

    sub.add_parser("network", help="Chain head, gas prices, fee history, client and sync status")

    gas = sub.add_parser("gas", help="Estimate gas and cost for a call")
    gas.add_argument("--from", dest="from_address", required=True)
    gas.add_argument("--to", dest="to_address", required=True)
    gas.add_argument("--value", default="0", help="Value in ether (default 0)")
    gas.add_argument("--data", default=None, help="Hex calldata")
    return parser


async def _dispatch(container: Container, args: argparse.Namespace) -> Any:
    if args.command == "nfts":
        window = None
        if args.from_block is not None or args.to_block is not None:
            if args.from_block is None or args.to_block is None:
                raise InvalidInputError("--from-block and --to-block must be given together", field="window")
            window = ScanWindow(args.from_block, args.to_block)
        report = await container.ownership_service().reconcile_ownership(args.address, window)
        return _ownership_payload(report)
    if args.command == "stats":
        snapshot = await container.activity_aggregator().aggregate_activity(args.address, args.timeframe)
        return _stats_payload(snapshot)
    if args.command == "tokens":
        result = await container.token_balance_service().get_token_balances(args.address)
        payload = _jsonable(result)
        for entry, balance in zip(payload["balances"], result.balances):
            entry["balance"] = str(balance.balance)
        return payload
    if args.command == "tx":
        summary = await container.transaction_lookup_service().get_transaction_summary(args.hash)
        payload = _jsonable(summary)
        payload["value_ether"] = str(summary.value_ether)
        payload["fee_ether"] = None if summary.fee_ether is None else str(summary.fee_ether)
        return payload
    if args.command == "network":
        return _network_payload(await container.network_info_service().get_network_info())
    if args.command == "gas":
        estimate = await container.network_info_service().estimate_gas(
            args.from_address,
            args.to_address,
            value_wei=_parse_ether_arg(args.value),
            data=args.data,
        )
        return _gas_payload(estimate)
    overview = await container.wallet_overview_service().get_overview(args.address)
    payload = _jsonable(overview)
    payload["balance_ether"] = str(overview.balance_ether)
    payload["gas_price_gwei"] = str(overview.gas_price_gwei)
    return payload


async def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, json_format=args.log_json)
    logger = structlog.get_logger("main")
    container = Container()
    try:
        payload = await _dispatch(container, args)
    except InvalidInputError as e:
        logger.error("main_invalid_input", command=args.command, field=e.field, error_message=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2
    except WalletInspectorError as e:
        logger.error(
            "main_command_failed",
            command=args.command,
            error_type=type(e).__name__,
            error_message=str(e),
        )
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        await container.http_client().aclose()
    print(json.dumps(payload, indent=2, default=str))
    return 0


def main() -> None:
    sys.exit(asyncio.run(run()))


__all__ = ["build_parser", "main", "run"]

if __name__ == "__main__":
    main()
