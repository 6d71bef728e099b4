import re

from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, DealTypeRule, Vocabulary
from savings_engine.schemas.deals import DealType

# Priority order matters: the first pattern that yields a valid percent wins
_PERCENT_PATTERNS = (
    re.compile(r"(?<![\d.])(\d{1,3})\s*%\s*off\b", re.IGNORECASE),
    re.compile(r"\bsave\s*(\d{1,3})\s*%", re.IGNORECASE),
    re.compile(r"\bup\s+to\s*(\d{1,3})\s*%", re.IGNORECASE),
    re.compile(r"(?<![\d.])(\d{1,3})\s*%\s*discount", re.IGNORECASE),
)

_AMOUNT = r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{1,2}))?"
_SAVINGS_PATTERNS = (
    re.compile(r"\bsave\s*(?:up\s+to\s*)?\$\s*" + _AMOUNT, re.IGNORECASE),
    re.compile(r"\$\s*" + _AMOUNT + r"\s*off\b", re.IGNORECASE),
)

_MARKER_CODE_RE = re.compile(
    r"\b(?:promo\s*code|coupon\s*code|discount\s*code|code|promo|coupon)s?\b"
    r"\s*(?::|-|\bis\b)?\s*[\"'“‘]?([A-Za-z0-9][A-Za-z0-9\-]{3,14})\b",
    re.IGNORECASE,
)
_QUOTED_CODE_RE = re.compile(r"[\"'“‘]([A-Z0-9][A-Z0-9\-]{2,14})[\"'”’]")

_COMMON_WORDS = frozenset({
    "CODE", "CODES", "PROMO", "COUPON", "COUPONS", "DEAL", "DEALS", "FREE",
    "SAVE", "HERE", "TODAY", "NOW", "ONLINE", "OFFER", "SALE", "BOOK",
    "AVAILABLE", "DISCOUNT", "ONLY", "YOUR", "WITH", "FROM",
})
_YEAR_RE = re.compile(r"(?:19|20)\d{2}")

UNKNOWN_COMPANY = "Various"


def extract_discount_percent(text: str | None) -> int | None:
    """Return the first "amount off" percentage found in text (0-100)."""
    if not text:
        return None
    for pattern in _PERCENT_PATTERNS:
        for match in pattern.finditer(text):
            value = int(match.group(1))
            if 0 <= value <= 100:
                return value
    return None


def _accept_code(token: str) -> str | None:
    code = token.strip("-.,;:!?")
    if len(code) < 3:
        return None
    # Pure lowercase words ("codes", "available") are prose, not codes
    if not (any(c.isdigit() for c in code) or code.isupper()):
        return None
    code = code.upper()
    if code in _COMMON_WORDS or _YEAR_RE.fullmatch(code):
        return None
    return code


def extract_promo_code(text: str | None) -> str | None:
    """Find a promo code after a code/promo/coupon marker or in quotes."""
    if not text:
        return None
    for match in _MARKER_CODE_RE.finditer(text):
        code = _accept_code(match.group(1))
        if code:
            return code
    for match in _QUOTED_CODE_RE.finditer(text):
        code = _accept_code(match.group(1))
        if code:
            return code
    return None


def estimate_savings_absolute(text: str | None) -> float | None:
    """Dollar savings mentioned as "save $N" or "$N off"."""
    if not text:
        return None
    for pattern in _SAVINGS_PATTERNS:
        match = pattern.search(text)
        if match:
            whole, cents = match.group(1), match.group(2)
            value = float(whole.replace(",", ""))
            if cents:
                value += float(f"0.{cents}")
            return value
    return None


def _classify(text: str, rules: list[DealTypeRule]) -> DealType:
    lowered = text.lower()
    for rule in rules:
        if any(keyword in lowered for keyword in rule.keywords):
            return rule.category
    return DealType.general


def extract_deal_type(
    title: str | None,
    snippet: str | None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> DealType:
    """Car rental deal type: corporate, AAA, military, promo code, general."""
    return _classify(f"{title or ''} {snippet or ''}", vocabulary.car_deal_types)


def extract_hotel_deal_type(
    title: str | None,
    snippet: str | None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> DealType:
    return _classify(f"{title or ''} {snippet or ''}", vocabulary.hotel_deal_types)


def identify_company(
    title: str | None,
    snippet: str | None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    text = f"{title or ''} {snippet or ''}".lower()
    for vendor in vocabulary.vendors:
        if vendor.lower() in text:
            return vendor
    return UNKNOWN_COMPANY
