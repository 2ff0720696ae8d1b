"""Heuristic token estimation utilities."""


CHARS_PER_TOKEN = 4
# CJK legal text packs more meaning per character than English prose.
CJK_CHARS_PER_TOKEN = 3


def estimate_tokens(text: str, chars_per_token: int = CHARS_PER_TOKEN) -> int:
    """Approximate token count from character length."""
    return max(0, len(text) // chars_per_token)
