import re
import unicodedata

from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY
from savings_engine.schemas.search import BasePriceRecord

_NON_WORD_RE = re.compile(r"[^a-z0-9]+")

DEFAULT_STOP_WORDS = frozenset(DEFAULT_VOCABULARY.name_stop_words)


def normalize_name(text: str) -> str:
    """Lowercase, strip accents and punctuation, collapse whitespace."""
    nfkd = unicodedata.normalize("NFKD", text.lower())
    ascii_text = "".join(c for c in nfkd if not unicodedata.combining(c))
    return _NON_WORD_RE.sub(" ", ascii_text).strip()


def _significant_tokens(name: str, stop_words: frozenset[str]) -> set[str]:
    return {w for w in normalize_name(name).split() if len(w) > 2 and w not in stop_words}


def names_match(
    mention: str,
    record_name: str,
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
) -> bool:
    """Substring containment either way, or enough shared significant words.

    With 2+ significant words in the mention at least 2 must be shared, so
    "Disney All-Star Movies" matches "Disney's All-Star Movies Resort" but a
    lone shared brand word does not.
    """
    a, b = normalize_name(mention), normalize_name(record_name)
    if not a or not b:
        return False
    if a in b or b in a:
        return True

    mention_tokens = _significant_tokens(mention, stop_words)
    record_tokens = _significant_tokens(record_name, stop_words)
    if not mention_tokens or not record_tokens:
        return False
    required = min(2, len(mention_tokens))
    return len(mention_tokens & record_tokens) >= required


def find_matching_record(
    mention: str,
    records: list[BasePriceRecord],
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
) -> BasePriceRecord | None:
    """First record (input order) whose name matches the mention."""
    for record in records:
        if names_match(mention, record.name, stop_words):
            return record
    return None


def find_base_price(
    mention: str,
    records: list[BasePriceRecord],
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
) -> float | None:
    record = find_matching_record(mention, records, stop_words)
    return record.amount if record else None
