"""Transfer log decoding: raw eth_getLogs records -> TransferFact.

Decoding never raises on malformed topics: a missing or unparsable token-id
topic yields "0" and a missing address topic yields "". One bad log must not
sink a whole batch.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

from wallet_inspector.clients.rpc_client.schema import LogSchema
from wallet_inspector.models.transfer_fact import TransferFact
from wallet_inspector.utils.units import hex_to_int
from wallet_inspector.utils.validation import normalize_address


def _topic(topics: list[Any], index: int) -> Optional[str]:
    if index >= len(topics):
        return None
    value = topics[index]
    return value if isinstance(value, str) else None


def decode_uint256_topic(topic: Optional[str]) -> str:
    """Unsigned big-endian word -> decimal string; "0" for absent or malformed input."""
    if not topic:
        return "0"
    raw = topic.strip()
    if raw.lower().startswith("0x"):
        raw = raw[2:]
    if not raw:
        return "0"
    try:
        return str(int(raw, 16))
    except ValueError:
        return "0"


def decode_address_topic(topic: Optional[str]) -> str:
    """Low 20 bytes of an indexed address topic, lower-cased; "" if absent."""
    if not topic:
        return ""
    raw = topic.strip().lower()
    if raw.startswith("0x"):
        raw = raw[2:]
    if len(raw) < 40:
        return ""
    return "0x" + raw[-40:]


def decode_transfer_log(log: LogSchema) -> TransferFact:
    """Map one Transfer log onto a TransferFact.

    ERC-721 logs carry the token id as the third indexed topic. ERC-20 logs
    have no such topic; they decode with token id "0", has_token_id=False
    and the data word as amount.
    """
    topics = list(log.get("topics") or [])
    token_topic = _topic(topics, 3)
    has_token_id = token_topic is not None
    amount: Optional[int] = None
    if not has_token_id:
        data = log.get("data")
        if isinstance(data, str) and len(data) > 2:
            amount = hex_to_int(data, default=0)

    raw_log_index = log.get("logIndex")
    raw_timestamp = log.get("blockTimestamp")
    return TransferFact(
        contract_address=normalize_address(log.get("address")),
        token_id=decode_uint256_topic(token_topic),
        from_address=decode_address_topic(_topic(topics, 1)),
        to_address=decode_address_topic(_topic(topics, 2)),
        block_number=hex_to_int(log.get("blockNumber")),
        transaction_hash=(log.get("transactionHash") or "").strip().lower(),
        log_index=hex_to_int(raw_log_index) if raw_log_index is not None else None,
        timestamp=hex_to_int(raw_timestamp) if raw_timestamp is not None else None,
        has_token_id=has_token_id,
        amount=amount,
    )


def decode_transfer_logs(logs: Iterable[LogSchema]) -> list[TransferFact]:
    """Decode many logs, skipping those flagged as removed by a reorg."""
    return [decode_transfer_log(log) for log in logs if not log.get("removed")]
