MAX_SEARCH_LENGTH = 100
LIKE_ESCAPE = "\\"


def build_search_pattern(term: str) -> str:
    """
    Turn user input into a case-insensitive substring LIKE pattern.

    The term is clamped first, then LIKE wildcards are escaped so the
    input only ever matches literally. Use with ``ilike(..., escape=LIKE_ESCAPE)``.
    """
    clamped = term.strip()[:MAX_SEARCH_LENGTH]
    escaped = (
        clamped.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
