"""Email and phone extraction from raw page content (HTML + visible text)."""

import re
from typing import List, Optional

from lib.extractors.registry import register


# Generic token, role-prefixed token, mailto target. Scanned in this order.
EMAIL_PATTERNS = [
    re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
    re.compile(r"(?:booking|info|contact|events|music)@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", re.IGNORECASE),
    re.compile(r"mailto:[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", re.IGNORECASE),
]
PRIORITY_EMAIL = re.compile(r"^(?:booking|info|contact|events|music)@")
EXCLUDED_EMAIL_TOKENS = ("noreply", "example")

PHONE_PATTERNS = [
    re.compile(r"(?:phone|tel|call|contact)[:\s]*(\(\d{3}\)\s*\d{3}[-.\s]*\d{4})", re.IGNORECASE),
    re.compile(r"(?:phone|tel|call|contact)[:\s]*(\d{3}[-.\s]*\d{3}[-.\s]*\d{4})", re.IGNORECASE),
    re.compile(r"(?<!\w)(\(\d{3}\)\s*\d{3}[-.\s]*\d{4})\b"),
    re.compile(r"\b(\d{3}[-.\s]*\d{3}[-.\s]*\d{4})\b"),
    re.compile(r"tel:([+]?[\d\s\-\(\)\.]+)", re.IGNORECASE),
]


def find_emails(content: str) -> List[str]:
    """All candidate emails, lower-cased, de-duplicated in first-seen order."""
    seen = {}
    for pattern in EMAIL_PATTERNS:
        for match in pattern.finditer(content or ""):
            email = match.group(0).lower()
            if email.startswith("mailto:"):
                email = email[len("mailto:"):]
            if "@" not in email:
                continue
            if any(token in email for token in EXCLUDED_EMAIL_TOKENS):
                continue
            seen.setdefault(email, None)
    return list(seen)


@register("email")
def extract_email(content: str, url: str = "") -> Optional[str]:
    """Pick the best contact email, preferring booking/info/contact style inboxes."""
    emails = find_emails(content)
    for email in emails:
        if PRIORITY_EMAIL.match(email):
            return email
    return emails[0] if emails else None


def format_phone(raw: str) -> Optional[str]:
    """Normalize a phone string to (XXX) XXX-XXXX.

    Accepts 10 digits, or 11 digits with a leading country code of 1.
    Anything else is rejected.
    """
    digits = re.sub(r"\D", "", raw or "")
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return None
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def find_phones(content: str) -> List[str]:
    seen = {}
    for pattern in PHONE_PATTERNS:
        for match in pattern.finditer(content or ""):
            phone = format_phone(match.group(1))
            if phone:
                seen.setdefault(phone, None)
    return list(seen)


@register("phone")
def extract_phone(content: str, url: str = "") -> Optional[str]:
    phones = find_phones(content)
    return phones[0] if phones else None
