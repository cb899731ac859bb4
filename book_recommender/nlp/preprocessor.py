"""Indonesian text preprocessing for TF-IDF vectorization.

Reduces free text (a title or synopsis) to an ordered sequence of lemmas:

1. lowercase
2. punctuation → space
3. whitespace tokenization
4. stopword and short-token removal
5. rule-based affix stripping (first matching rule wins)

Every stage is a total function: empty text yields an empty token list.

Anti-Patterns Avoided:
- S1192: Word lists and rules extracted to module level
- S3776: One function per pipeline stage
"""

from __future__ import annotations

import re
from typing import Final

# =============================================================================
# Module Constants (S1192 compliance)
# =============================================================================

# Tokens shorter than this are discarded before lemmatization
MIN_TOKEN_LENGTH: Final[int] = 3

# Common Indonesian function words
STOP_WORDS: Final[frozenset[str]] = frozenset({
    "di", "ke", "dari", "dan", "atau", "adalah", "ini", "itu", "yang", "untuk",
    "pada", "dengan", "oleh", "akan", "telah", "sudah", "dapat", "juga", "sebagai",
    "dalam", "serta", "karena", "jika", "maka", "seperti", "antara", "mereka",
    "kita", "kami", "saya", "anda", "dia", "ia", "nya", "ada", "tidak", "bukan",
    "belum", "hanya", "masih", "pernah", "sangat", "lebih", "paling", "setiap",
    "semua", "beberapa", "banyak", "sedikit", "lain", "lainnya", "sendiri",
})

# Affix rules: (name, pattern). Each pattern must match the whole token and
# capture a non-empty stem. Order matters: only the first match is applied.
LEMMA_RULES: Final[tuple[tuple[str, re.Pattern[str]], ...]] = (
    ("men-", re.compile(r"men(.+)")),
    ("mem-", re.compile(r"mem(.+)")),
    ("meng-", re.compile(r"meng(.+)")),
    ("me-", re.compile(r"me(.+)")),
    ("ber-", re.compile(r"ber(.+)")),
    ("ter-", re.compile(r"ter(.+)")),
    ("pe-", re.compile(r"pe(.+)")),
    ("di-", re.compile(r"di(.+)")),
    ("ke-an", re.compile(r"ke(.+)an")),
    ("-an", re.compile(r"(.+)an")),
    ("-kan", re.compile(r"(.+)kan")),
    ("-i", re.compile(r"(.+)i")),
)

# Only ASCII letters, digits and underscore count as word characters; accented
# letters split tokens. Whitespace stays Unicode-aware.
_PUNCTUATION_RE: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")


# =============================================================================
# Pipeline Stages
# =============================================================================


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace.

    Examples:
        >>> normalize_text("  Laskar   Pelangi: Sebuah Novel! ")
        'laskar pelangi sebuah novel'
    """
    lowered = text.lower()
    without_punctuation = _PUNCTUATION_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", without_punctuation).strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text into whitespace-delimited tokens."""
    normalized = normalize_text(text)
    if not normalized:
        return []
    return normalized.split(" ")


def remove_stopwords(tokens: list[str]) -> list[str]:
    """Drop stopwords and tokens shorter than MIN_TOKEN_LENGTH."""
    return [
        token
        for token in tokens
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]


def lemmatize(word: str) -> str:
    """Strip the first matching Indonesian affix from a word.

    Args:
        word: A lowercase token.

    Returns:
        The captured stem of the first matching rule, or the word unchanged.

    Examples:
        >>> lemmatize("bermain")
        'main'
        >>> lemmatize("kebersihan")
        'bersih'
        >>> lemmatize("buku")
        'buku'
    """
    for _name, pattern in LEMMA_RULES:
        match = pattern.fullmatch(word)
        if match is not None:
            return match.group(1)
    return word


def preprocess(text: str | None) -> list[str]:
    """Run the full preprocessing pipeline on a piece of text.

    Args:
        text: Raw title or synopsis. None is treated as empty text.

    Returns:
        Lemmas in original token order.
    """
    if not text:
        return []
    return [lemmatize(token) for token in remove_stopwords(tokenize(text))]
