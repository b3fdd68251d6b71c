"""Script folding used for script-insensitive name comparisons.

Phonetic names may be typed in katakana or hiragana. Before comparing,
both sides are folded onto hiragana with a fixed code-point offset:
katakana U+30A1 (ァ) .. U+30F6 (ヶ) map to U+3041 (ぁ) .. U+3096 (ゖ).
Code points outside that range, including the prolonged sound mark ー and
the middle dot ・, pass through unchanged.
"""

import re

KATAKANA_FIRST = 0x30A1
KATAKANA_LAST = 0x30F6
KATAKANA_TO_HIRAGANA_OFFSET = 0x60

_WHITESPACE_RE = re.compile(r"\s+")


def fold_katakana(text: str) -> str:
    """Map every katakana code point in ``text`` onto its hiragana counterpart."""
    return "".join(
        chr(ord(ch) - KATAKANA_TO_HIRAGANA_OFFSET) if KATAKANA_FIRST <= ord(ch) <= KATAKANA_LAST else ch
        for ch in text
    )


def normalize_script(text: str | None) -> str:
    """Return ``text`` folded to hiragana with all whitespace removed.

    The result is idempotent: ``normalize_script(normalize_script(s)) ==
    normalize_script(s)``. ``None`` is treated as an empty string.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub("", fold_katakana(text)).strip()
