from typing import Dict, List, Optional, Tuple

from app.core.exceptions import ValidationError


def parse_sort(sort: Optional[str], allowed: Dict[str, object], default: Tuple[str, str]) -> List:
    """
    Build ORDER BY clauses from a ``field:direction`` query value.

    ``allowed`` maps public field names to columns. Unknown fields or
    directions are rejected for every entity.
    """
    field, direction = default
    if sort:
        field, _, direction = sort.partition(":")
        direction = direction or "desc"

    if field not in allowed or direction not in ("asc", "desc"):
        raise ValidationError("Invalid sort field")

    column = allowed[field]
    return [column.asc() if direction == "asc" else column.desc()]
