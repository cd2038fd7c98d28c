"""Tests for field name sanitizing and option normalization."""

import re

import pytest

from product_feed.core.feed.models import OptionValue
from product_feed.core.feed.options import is_default_value, normalize_options, sanitize_name


NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

LABELS = [
    "Color",
    "Størrelse",
    "Ærme længde",
    "Hånd",
    "Ring Size (EU)",
    "9 carat",
    "_private",
    "",
    "-",
    "Größe",
    "ÆØÅ",
    "opt_1",
    "tab\there",
    "emoji 💍",
]


class TestSanitizeName:
    """Tests for sanitize_name."""

    def test_lowercases(self):
        assert sanitize_name("Color") == "color"

    def test_replaces_danish_letters(self):
        assert sanitize_name("Størrelse") == "stoerrelse"
        assert sanitize_name("Ærme") == "aerme"
        assert sanitize_name("Hånd") == "haand"

    def test_replaces_invalid_characters(self):
        assert sanitize_name("Ring Size (EU)") == "ring_size__eu_"

    def test_prefixes_names_starting_with_digit(self):
        assert sanitize_name("9 carat") == "opt_9_carat"

    def test_keeps_leading_underscore(self):
        assert sanitize_name("_private") == "_private"

    def test_empty_label(self):
        assert sanitize_name("") == "opt_"

    @pytest.mark.parametrize("label", LABELS)
    def test_output_is_valid_name(self, label):
        assert NAME_PATTERN.match(sanitize_name(label))

    @pytest.mark.parametrize("label", LABELS)
    def test_idempotent(self, label):
        once = sanitize_name(label)
        assert sanitize_name(once) == once


class TestNormalizeOptions:
    """Tests for normalize_options."""

    def test_empty_input(self):
        assert normalize_options([]) == {}
        assert normalize_options([], mode="xml", namespace_prefix=True) == {}

    def test_json_mode_lowercases_title_only(self):
        options = [OptionValue(option_title="Ring Size", value="54")]
        assert normalize_options(options, mode="json") == {"ring size": "54"}

    def test_xml_mode_sanitizes_title(self):
        options = [OptionValue(option_title="Størrelse", value="M")]
        assert normalize_options(options, mode="xml") == {"stoerrelse": "M"}

    def test_xml_mode_with_namespace_prefix(self):
        options = [OptionValue(option_title="Color", value="Red")]
        assert normalize_options(options, mode="xml", namespace_prefix=True) == {"g:color": "Red"}

    def test_namespace_prefix_ignored_in_json_mode(self):
        options = [OptionValue(option_title="Color", value="Red")]
        assert normalize_options(options, mode="json", namespace_prefix=True) == {"color": "Red"}

    @pytest.mark.parametrize("value", ["Default", "Default Title", "default", "my default value"])
    def test_default_values_dropped(self, value):
        options = [
            OptionValue(option_title="Title", value=value),
            OptionValue(option_title="Color", value="Blue"),
        ]
        assert normalize_options(options) == {"color": "Blue"}

    def test_default_match_is_case_sensitive(self):
        assert is_default_value("DEFAULT") is False
        options = [OptionValue(option_title="Style", value="DEFAULT")]
        assert normalize_options(options) == {"style": "DEFAULT"}

    def test_missing_title_or_value_skipped(self):
        options = [
            OptionValue(option_title=None, value="Red"),
            OptionValue(option_title="Size", value=None),
            OptionValue(option_title="Size", value=""),
        ]
        assert normalize_options(options) == {}

    def test_later_option_wins_on_collision(self):
        options = [
            OptionValue(option_title="Color", value="Red"),
            OptionValue(option_title="COLOR", value="Blue"),
        ]
        assert normalize_options(options) == {"color": "Blue"}
