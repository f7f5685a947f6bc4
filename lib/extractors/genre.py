"""Genre tag extraction against a fixed vocabulary."""

import re
from typing import List, Optional, Set

from lib.extractors.registry import register


GENRE_VOCABULARY = [
    "rock", "hard rock", "indie", "alternative", "punk", "metal", "emo", "hardcore",
    "jazz", "blues", "swing", "soul", "funk", "r&b", "gospel",
    "country", "folk", "bluegrass", "americana", "acoustic", "singer-songwriter",
    "hip hop", "rap", "reggae", "ska", "latin",
    "electronic", "techno", "dance", "pop", "classical", "experimental", "jam band",
]
MAX_GENRES = 8
GENRE_SEPARATOR = "; "

# "Music: jazz, blues" / "Genres: indie and folk" / "Featuring: ..."
GENRE_PHRASE = re.compile(r"\b(?:music|genres?|style|featuring)\s*:\s*([^\n.<>]{1,200})", re.IGNORECASE)
PHRASE_SPLIT = re.compile(r"\s*(?:[,/;|+]|\band\b|&(?!b))\s*", re.IGNORECASE)


def _term_pattern(term: str) -> re.Pattern:
    # spaces inside a term also match hyphens ("hip-hop")
    body = re.escape(term).replace(r"\ ", r"[\s-]")
    return re.compile(r"(?<![\w&])" + body + r"(?![\w&])", re.IGNORECASE)


_TERM_PATTERNS = [(term, _term_pattern(term)) for term in GENRE_VOCABULARY]


def _canonical(term: str) -> str:
    return term.title()


def _match_vocabulary(text: str) -> Set[str]:
    return {_canonical(term) for term, pattern in _TERM_PATTERNS if pattern.search(text)}


def find_genres(content: str) -> List[str]:
    """Sorted, de-duplicated, title-cased genre tags (not truncated)."""
    content = content or ""
    genres = _match_vocabulary(content)

    for phrase in GENRE_PHRASE.findall(content):
        for token in PHRASE_SPLIT.split(phrase):
            token = token.strip()
            if token:
                genres |= _match_vocabulary(token)

    return sorted(genres)


@register("genres")
def extract_genres(content: str, url: str = "") -> Optional[str]:
    genres = find_genres(content)[:MAX_GENRES]
    return GENRE_SEPARATOR.join(genres) if genres else None
