"""JSON exporter for page records and inclusion trees (machine-friendly format)."""

import json
from typing import Any, Iterable, List

from graph.model import ShallowNode


def to_json(records: Iterable[Any], indent: int = 1) -> str:
    """
    Convert records to a JSON array.

    Works for RawFileRecord, ShallowNode and DeepNode values, or anything
    else with a `to_dict` method. Key order is fixed, so the same input
    always gives the same text.

    Args:
        records: Records to export, in output order.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the records.
    """
    return json.dumps([record.to_dict() for record in records], indent=indent)


def load_shallow_json(text: str) -> List[ShallowNode]:
    """
    Load shallow nodes written by `to_json`.

    Raises:
        ValueError: If the text is not a JSON array of node objects.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("shallow JSON must be an array of nodes")

    try:
        return [ShallowNode.from_dict(item) for item in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed shallow node: {e}") from e
