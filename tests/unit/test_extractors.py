"""Unit tests for field extraction strategies."""

import pytest

from prefix_swap.core.exceptions import ConfigurationError
from prefix_swap.core.factory import ComponentFactory
from prefix_swap.interfaces.extractor import ConstructSyntax, tokenize
from prefix_swap.strategies.archives import ZipArchiveReader
from prefix_swap.strategies.extractors import (
    BatchFieldExtractor,
    PreviewFieldExtractor,
    collect_prefixes,
)
from prefix_swap.strategies.extractors.preview import last_parenthesis_content


# =============================================================================
# Tokenizer Tests
# =============================================================================


class TestTokenize:
    """Test suite for brace-delimited token scanning."""

    def test_tokens_in_document_order(self):
        """Test that tokens are returned left to right."""
        assert tokenize("x {a.one} y {b.two} z") == ["a.one", "b.two"]

    def test_nested_braces_yield_innermost_span(self):
        """Test that a closing brace closes the nearest open brace."""
        assert tokenize("{{a.b}}") == ["a.b"]

    def test_empty_braces_are_skipped(self):
        """Test that empty spans produce no token."""
        assert tokenize("{}{a.x}") == ["a.x"]

    def test_unclosed_brace(self):
        """Test that an unclosed brace produces no token."""
        assert tokenize("{a.x") == []

    def test_span_across_xml_runs(self):
        """Test that markup inside a span is part of the token."""
        assert tokenize("{a.</w:t><w:t>x}") == ["a.</w:t><w:t>x"]


# =============================================================================
# Batch Extractor Tests
# =============================================================================


class TestBatchFieldExtractor:
    """Test suite for BatchFieldExtractor."""

    @pytest.fixture
    def extractor(self):
        """Create a batch extractor with the default keywords."""
        return BatchFieldExtractor()

    # =========================================================================
    # Normalization Tests
    # =========================================================================

    def test_normalize_loop(self, extractor):
        """Test that a loop yields its source collection."""
        assert extractor.normalize("цикл(item из a.list)") == "a.list"

    def test_normalize_choice(self, extractor):
        """Test that a choice wrapper is stripped."""
        assert extractor.normalize("выбор(a.kind)") == "a.kind"

    def test_normalize_conditional(self, extractor):
        """Test that a conditional wrapper is stripped."""
        assert extractor.normalize("если(a.flag)") == "a.flag"

    def test_normalize_strips_one_level_only(self, extractor):
        """Test that nested wrappers lose only the outer keyword."""
        assert extractor.normalize("если(если(a.x))") == "если(a.x)"

    def test_normalize_keeps_inner_parentheses(self, extractor):
        """Test that a field name containing parentheses survives intact."""
        assert extractor.normalize("если(a.fmt(x))") == "a.fmt(x)"

    def test_normalize_loop_without_separator(self, extractor):
        """Test that a loop token without the separator is kept verbatim."""
        assert extractor.normalize("цикл(a.list)") == "цикл(a.list)"

    def test_normalize_unclosed_conditional(self, extractor):
        """Test that a conditional without a closing parenthesis is kept."""
        assert extractor.normalize("если(a.flag") == "если(a.flag"

    def test_normalize_function_call_untouched(self, extractor):
        """Test that unknown wrappers are not stripped."""
        assert extractor.normalize("format(a.date)") == "format(a.date)"

    def test_normalize_plain_name(self, extractor):
        """Test that a plain name is returned unchanged."""
        assert extractor.normalize("a.name") == "a.name"

    # =========================================================================
    # Extraction Tests
    # =========================================================================

    def test_extract_sample_document(self, extractor, sample_xml):
        """Test extraction, cleaning and longest-first ordering."""
        names = extractor.extract(sample_xml, "a.", clean_constructs=True, sort_by_length=True)

        assert names.names == ("a.longer.name", "a.list", "a.flag", "a.name")
        assert names.strategy == "batch"
        assert names.old_prefix == "a."
        assert names.token_count == 4
        assert names.matched_count == 4

    def test_extract_without_sorting_keeps_first_occurrence_order(self, extractor, sample_xml):
        """Test that disabling sorting preserves document order."""
        names = extractor.extract(sample_xml, "a.", clean_constructs=True, sort_by_length=False)

        assert list(names) == ["a.list", "a.flag", "a.name", "a.longer.name"]

    def test_extract_without_cleaning_keeps_raw_tokens(self, extractor, sample_xml):
        """Test that raw tokens are returned when cleaning is disabled."""
        names = extractor.extract(sample_xml, "a.", clean_constructs=False, sort_by_length=False)

        assert "цикл(item из a.list)" in names
        assert "если(a.flag)" in names
        assert "a.list" not in names

    def test_extract_filters_by_prefix(self, extractor):
        """Test that tokens without the prefix are dropped."""
        names = extractor.extract("{a.x} {b.y} {выбор(c.z)}", "a.")
        assert names.names == ("a.x",)
        assert names.token_count == 3
        assert names.matched_count == 1

    def test_prefix_filter_applies_to_raw_token(self, extractor):
        """Test that the prefix is checked before the wrapper is removed."""
        names = extractor.extract("{цикл(a.item из list)}", "a.")
        assert names.names == ("list",)

    def test_extract_deduplicates(self, extractor):
        """Test that repeated references collapse to one name."""
        names = extractor.extract("{a.x} {a.x} {если(a.x)}", "a.")
        assert names.names == ("a.x",)
        assert names.matched_count == 3

    def test_equal_lengths_keep_first_occurrence_order(self, extractor):
        """Test that the length sort is stable."""
        names = extractor.extract("{a.c} {a.b} {a.aaa}", "a.")
        assert names.names == ("a.aaa", "a.c", "a.b")

    def test_extract_without_tokens(self, extractor):
        """Test that text without braces yields an empty set."""
        names = extractor.extract("<w:t>plain</w:t>", "a.")
        assert len(names) == 0
        assert names.token_count == 0

    def test_custom_keywords(self):
        """Test that construct keywords are configurable."""
        syntax = ConstructSyntax(loop="loop", loop_separator=" over ", choice="choice", conditional="if")
        extractor = BatchFieldExtractor(syntax)

        names = extractor.extract("{loop(i over a.items)} {if(a.ok)} {choice(a.kind)}", "a.")

        assert names.names == ("a.items", "a.kind", "a.ok")


# =============================================================================
# Preview Extractor Tests
# =============================================================================


class TestPreviewFieldExtractor:
    """Test suite for PreviewFieldExtractor."""

    @pytest.fixture
    def extractor(self):
        """Create a preview extractor with the default keywords."""
        return PreviewFieldExtractor()

    def test_normalize_loop(self, extractor):
        """Test that a loop yields its source collection."""
        assert extractor.normalize("цикл(item из a.list)") == "a.list"

    def test_normalize_function_call(self, extractor):
        """Test that the last parenthesis content is taken."""
        assert extractor.normalize("format(a.date)") == "a.date"

    def test_normalize_conditional_with_parenthesized_name(self, extractor):
        """Test that the name inside the conditional is stripped a second time."""
        assert extractor.normalize("если(a.fmt(x))") == "x"

    def test_normalize_trims_whitespace(self, extractor):
        """Test that surrounding whitespace is removed."""
        assert extractor.normalize("выбор( a.kind )") == "a.kind"

    def test_extract_all_fields_with_empty_prefix(self, extractor):
        """Test that an empty prefix keeps every field."""
        names = extractor.extract("{a.name} {цикл(i из b.items)} {format(c.date)} {plain}")
        assert set(names) == {"a.name", "b.items", "c.date", "plain"}

    def test_prefix_filter_applies_after_normalization(self, extractor):
        """Test that the prefix is checked on the normalized name."""
        names = extractor.extract("{цикл(a.item из list)} {a.x}", "a.")
        assert names.names == ("a.x",)

    def test_strategies_differ_on_parenthesized_names(self, extractor):
        """Test the known divergence between the two strategies."""
        text = "{если(a.fmt(x))}"

        assert BatchFieldExtractor().extract(text, "a.").names == ("a.fmt(x)",)
        assert extractor.extract(text, "a.").names == ()


class TestPreviewHelpers:
    """Test suite for preview helper functions."""

    def test_last_parenthesis_content(self):
        assert last_parenthesis_content("f(g(x), y)") == "x"

    def test_last_parenthesis_content_unclosed(self):
        assert last_parenthesis_content("fn(a.b") == "a.b"

    def test_last_parenthesis_content_without_parenthesis(self):
        assert last_parenthesis_content("a.b") == "a.b"

    def test_collect_prefixes(self):
        """Test that distinct heads are returned sorted."""
        assert collect_prefixes(["b.y.z", "a.x", "a.w", "plain", ".dot"]) == ["a", "b"]

    def test_collect_prefixes_empty(self):
        assert collect_prefixes([]) == []


# =============================================================================
# Component Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for strategy selection."""

    @pytest.fixture
    def factory(self, settings):
        return ComponentFactory(settings)

    def test_default_extractor_is_batch(self, factory):
        assert isinstance(factory.get_extractor(), BatchFieldExtractor)

    def test_preview_extractor(self, factory):
        assert isinstance(factory.get_preview_extractor(), PreviewFieldExtractor)

    def test_extractor_name_is_case_insensitive(self, factory):
        assert isinstance(factory.get_extractor(" Preview "), PreviewFieldExtractor)

    def test_extractors_are_cached(self, factory):
        """Test that repeated lookups return the same instance."""
        assert factory.get_extractor("batch") is factory.get_extractor("batch")

    def test_clear_cache(self, factory):
        """Test that clearing the cache creates fresh instances."""
        first = factory.get_extractor("batch")
        factory.clear_cache()
        assert factory.get_extractor("batch") is not first

    def test_unknown_extractor(self, factory):
        """Test that an unknown strategy name raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Unknown extractor type"):
            factory.get_extractor("fuzzy")

    def test_archive_reader(self, factory):
        reader = factory.get_archive_reader()
        assert isinstance(reader, ZipArchiveReader)
        assert factory.get_archive_reader() is reader
