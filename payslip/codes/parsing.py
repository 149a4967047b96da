import re

_CODE_SEPARATOR_RE = re.compile(r"[\s,]+")


def parse_code_list(raw: str | None) -> list[str]:
    """Split a comma/whitespace separated code list.

    Empty tokens are discarded and repeated codes keep their first
    position.
    """
    if not raw:
        return []
    codes: list[str] = []
    for token in _CODE_SEPARATOR_RE.split(raw):
        if token and token not in codes:
            codes.append(token)
    return codes
