"""Matching of image names against patterns that may contain ``*`` wildcards."""

WILDCARD = "*"


def compare(pattern: str, text: str) -> bool:
    """Return True if ``text`` matches ``pattern``, where ``*`` stands for any run of characters."""
    if not pattern:
        return text == pattern

    if pattern == WILDCARD:
        return True

    pieces = pattern.split(WILDCARD)
    if len(pieces) == 1:
        return text == pattern

    starting_wildcard = pattern.startswith(WILDCARD)
    ending_wildcard = pattern.endswith(WILDCARD)

    *leading, last = pieces
    for position, piece in enumerate(leading):
        index = text.find(piece)
        if position == 0:
            if not starting_wildcard and index != 0:
                return False
        elif index < 0:
            return False
        text = text[index + len(piece):]

    return ending_wildcard or text.endswith(last)


def compare_any_tag(pattern: str, text: str) -> bool:
    """Like :func:`compare`, but also accept ``text`` when it only adds a tag to ``pattern``."""
    return compare(pattern, text) or compare(pattern + ":*", text)