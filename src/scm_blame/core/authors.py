import re

_DELIMITERS = re.compile(r"[.,\s]+")


def normalize_author(raw: str | None) -> str | None:
    """Canonicalize a free-form author identifier.

    The domain of an email-style identifier is dropped, the rest is split on
    runs of ``.``, ``,`` and whitespace, lowercased, sorted by code point and
    joined with single spaces. ``"Doe, John"``, ``"john.doe@example.com"`` and
    ``"John Doe"`` all become ``"doe john"``.
    """
    if raw is None:
        return None
    local_part = raw.split("@", 1)[0]
    tokens = [token.lower() for token in _DELIMITERS.split(local_part) if token]
    return " ".join(sorted(tokens))
