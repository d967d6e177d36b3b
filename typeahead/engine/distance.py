"""Edit distance and derived similarity between strings."""


def distance(a: str, b: str) -> int:
    """
    Levenshtein distance: insert, delete and substitute each cost 1.

    Always walks the full length of both strings.
    """
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                current[j - 1] + 1,
                previous[j] + 1,
                previous[j - 1] + cost
            ))
        previous = current

    return previous[len(b)]


def similarity(a: str, b: str) -> float:
    """1 - distance / longest length, in [0, 1]. Two empty strings are identical."""
    return 1 - distance(a, b) / max(len(a), len(b), 1)
