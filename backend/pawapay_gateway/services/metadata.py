"""
Metadata Shape Translation

The two wire versions carry the same metadata in different shapes:

    V1: {"fieldName": "orderId", "fieldValue": "ORD-1", "isPII": true}
    V2: {"orderId": "ORD-1", "isPII": true}

Items are translated 1:1 and the isPII flag is preserved when present.
Translating an item that is already in the target shape returns an equal copy.
"""
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import InvalidRequestError

PII_KEY = "isPII"


def is_v1_item(item: Dict[str, Any]) -> bool:
    """V1 items are recognised by carrying both fieldName and fieldValue."""
    return "fieldName" in item and "fieldValue" in item


def _require_mapping(item: Any, index: int) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise InvalidRequestError(
            f"Metadata item {index} must be an object, got {type(item).__name__}.",
            details={"index": index}
        )
    return item


def _v2_pairs(item: Dict[str, Any]) -> List[Tuple[str, Any]]:
    return [(key, value) for key, value in item.items() if key != PII_KEY]


def to_v2_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Translate one V1 item to V2 shape; V2 items come back unchanged."""
    if not is_v1_item(item):
        return dict(item)

    translated: Dict[str, Any] = {str(item["fieldName"]): item["fieldValue"]}
    if PII_KEY in item:
        translated[PII_KEY] = item[PII_KEY]
    return translated


def to_v1_item(item: Dict[str, Any], index: int = 0) -> Dict[str, Any]:
    """Translate one V2 item to V1 shape; V1 items come back unchanged."""
    if is_v1_item(item):
        return dict(item)

    pairs = _v2_pairs(item)
    if len(pairs) != 1:
        raise InvalidRequestError(
            f"Metadata item {index} must hold exactly one field to be sent to V1, "
            f"got {len(pairs)}.",
            details={"index": index, "fields": [key for key, _ in pairs]}
        )

    name, value = pairs[0]
    translated: Dict[str, Any] = {"fieldName": name, "fieldValue": value}
    if PII_KEY in item:
        translated[PII_KEY] = item[PII_KEY]
    return translated


def to_v2_metadata(items: Optional[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Translate a metadata list for the V2 wire format."""
    return [to_v2_item(_require_mapping(item, i)) for i, item in enumerate(items or [])]


def to_v1_metadata(items: Optional[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Translate a metadata list for the V1 wire format."""
    return [to_v1_item(_require_mapping(item, i), i) for i, item in enumerate(items or [])]


def iter_metadata_pairs(items: Sequence[Any]) -> Iterator[Tuple[str, Any, Any]]:
    """Yield (name, value, isPII) for every field in a mixed-shape metadata list."""
    for i, item in enumerate(items):
        item = _require_mapping(item, i)
        pii = item.get(PII_KEY)
        if is_v1_item(item):
            yield item["fieldName"], item["fieldValue"], pii
        else:
            for name, value in _v2_pairs(item):
                yield name, value, pii
