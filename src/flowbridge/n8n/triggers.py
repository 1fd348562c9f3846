"""Trigger-type classification from a workflow's node list.

n8n node type strings (e.g. "n8n-nodes-base.webhook") are an implementation
detail of the remote product, so matching is kept behind one function with a
replaceable rule table.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeAlias

from src.flowbridge.models.enums import TriggerType

TriggerRule: TypeAlias = tuple[tuple[str, ...], TriggerType]

# Ordered: the first rule matched by any node wins.
DEFAULT_TRIGGER_RULES: tuple[TriggerRule, ...] = (
    (("webhook",), TriggerType.WEBHOOK),
    (("schedule", "cron"), TriggerType.SCHEDULE),
    (("trigger",), TriggerType.EVENT),
)


def _node_types(nodes: Iterable[Mapping[str, Any]]) -> list[str]:
    return [str(node.get("type") or "").lower() for node in nodes]


def classify_trigger_type(
    nodes: Iterable[Mapping[str, Any]],
    rules: Sequence[TriggerRule] = DEFAULT_TRIGGER_RULES,
) -> TriggerType:
    """Classify how a workflow is started.

    Args:
        nodes: The workflow's node dicts; only their "type" is read.
        rules: Ordered (substrings, trigger type) pairs.

    Returns:
        The type of the first rule whose substring occurs in any node type,
        or TriggerType.MANUAL when nothing matches.
    """
    node_types = _node_types(nodes)
    for needles, trigger_type in rules:
        if any(needle in node_type for needle in needles for node_type in node_types):
            return trigger_type
    return TriggerType.MANUAL


def extract_webhooks(nodes: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Pick out webhook nodes and their path/method/name.

    Nodes without a configured path are skipped.
    """
    webhooks = []
    for node in nodes:
        if "webhook" not in str(node.get("type") or "").lower():
            continue
        parameters = node.get("parameters") or {}
        path = parameters.get("path")
        if not path:
            continue
        webhooks.append(
            {
                "node_name": str(node.get("name") or ""),
                "path": str(path),
                "method": str(parameters.get("httpMethod") or "GET").upper(),
            }
        )
    return webhooks
