"""Tests for extractor registry."""

import pytest

from lib.extractors.registry import (
    register,
    get_extractor,
    list_extractors,
    is_registered,
    _REGISTRY,
)
from lib.extractors.contact import extract_email
import lib.extractors  # noqa: F401


class TestRegistry:
    """Tests for extractor registry functions."""

    def test_builtin_extractors_registered(self):
        """All venue fact types have an extractor."""
        facts = list_extractors()

        for fact in ("email", "phone", "capacity", "genres"):
            assert fact in facts

    def test_get_extractor_returns_function(self):
        assert get_extractor("email") is extract_email

    def test_get_extractor_raises_for_unknown(self):
        with pytest.raises(ValueError, match="Unknown extractor"):
            get_extractor("fax")

    def test_is_registered(self):
        assert is_registered("phone") is True
        assert is_registered("fax") is False

    def test_register_new_extractor(self):
        """New fact types can be plugged in without touching the pipeline."""
        try:
            @register("test_fact")
            def extract_test(content, url=""):
                return "x" if "x" in content else None

            assert get_extractor("test_fact")("xyz") == "x"
        finally:
            _REGISTRY.pop("test_fact", None)

    def test_register_duplicate_raises(self):
        with pytest.raises(ValueError, match="already registered"):
            @register("email")
            def other_email(content, url=""):
                return None
