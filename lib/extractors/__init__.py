"""Pattern extractors for venue contact and profile facts."""

from lib.extractors.registry import register, get_extractor, list_extractors, is_registered
from lib.extractors.contact import extract_email, extract_phone, format_phone
from lib.extractors.capacity import extract_capacity
from lib.extractors.genre import extract_genres
from lib.extractors.pipeline import ExtractionResult, extract_facts, FACT_TYPES

__all__ = [
    "register",
    "get_extractor",
    "list_extractors",
    "is_registered",
    "extract_email",
    "extract_phone",
    "format_phone",
    "extract_capacity",
    "extract_genres",
    "ExtractionResult",
    "extract_facts",
    "FACT_TYPES",
]
