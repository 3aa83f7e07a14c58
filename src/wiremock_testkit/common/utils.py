"""
wiremock-testkit Common Utilities

Helpers shared by the admin client: turning caller payloads into JSON
and reading stub identifiers back out of them.
"""

import json
from typing import Any, Dict, Mapping, Optional

from .errors import ValidationError

# Keys WireMock accepts for a mapping identifier, in lookup order
STUB_ID_KEYS = ('id', 'uuid')


def payload_to_dict(payload: Any) -> Dict[str, Any]:
    """
    Convert a stub definition or request criteria to a plain dictionary.

    Accepts mappings as-is and any object exposing to_dict().

    Raises:
        ValidationError: If the payload has no dictionary form
    """
    if isinstance(payload, Mapping):
        return dict(payload)

    to_dict = getattr(payload, 'to_dict', None)
    if callable(to_dict):
        data = to_dict()
        if isinstance(data, Mapping):
            return dict(data)
        raise ValidationError(
            f"{type(payload).__name__}.to_dict() returned {type(data).__name__}, expected a mapping"
        )

    raise ValidationError(
        f"Cannot serialize {type(payload).__name__}: expected a mapping or an object with to_dict()"
    )


def serialize_payload(payload: Any) -> str:
    """
    Serialize a stub definition or request criteria to a JSON string.

    Raises:
        ValidationError: If the payload is not JSON serializable
    """
    data = payload_to_dict(payload)
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"build request body error: {e}") from e


def extract_stub_id(stub: Any) -> Optional[str]:
    """
    Read the identifier of a stub definition without modifying it.

    Mappings are looked up by the 'id' then 'uuid' key, other objects by
    the 'uuid' then 'id' attribute.

    Returns:
        The identifier as a string, or None if the stub carries none
    """
    if isinstance(stub, Mapping):
        for key in STUB_ID_KEYS:
            value = stub.get(key)
            if value:
                return str(value)
        return None

    for attr in ('uuid', 'id'):
        value = getattr(stub, attr, None)
        if callable(value):
            value = value()
        if value:
            return str(value)
    return None
