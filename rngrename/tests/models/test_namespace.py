"""Unit tests for the naming space model."""

import math
import random
import string

import pytest

from rngrename.errors import ConfigError
from rngrename.models.namespace import (
    CaseMode,
    CharSetSelection,
    NameSpace,
    resolve_alphabet,
    validate_custom_chars,
)


class TestNameSpaceSize:
    """Tests for NameSpace size computation."""

    @pytest.mark.parametrize(
        "alphabet,length,expected",
        [
            ("ab", 2, 4),
            ("0123456789", 1, 10),
            (string.digits + "abcdef", 4, 16**4),
            ("x", 5, 1),
        ],
    )
    def test_size_is_alphabet_size_to_the_length(self, alphabet, length, expected):
        """Test that size equals alphabet size raised to the name length."""
        namespace = NameSpace(alphabet=alphabet, length=length)

        assert namespace.size() == expected

    def test_mixed_case_doubles_letters_only(self):
        """Test that mixed case doubles letters but not digits."""
        namespace = NameSpace(alphabet=string.ascii_lowercase + string.digits, length=2, case_mode=CaseMode.MIXED)

        assert namespace.symbol_count() == 26 * 2 + 10
        assert namespace.size() == 62**2

    def test_upper_case_fixes_letter_case(self):
        """Test that upper case converts letters and keeps other symbols."""
        namespace = NameSpace(alphabet="abc1", length=1, case_mode=CaseMode.UPPER)

        assert namespace.symbols == ("A", "B", "C", "1")

    def test_lower_case_fixes_letter_case(self):
        """Test that lower case converts letters."""
        namespace = NameSpace(alphabet="ABC", length=1, case_mode=CaseMode.LOWER)

        assert namespace.symbols == ("a", "b", "c")

    def test_case_expansion_removes_duplicates(self):
        """Test that symbols equal after case expansion are counted once."""
        namespace = NameSpace(alphabet="aA1", length=1, case_mode=CaseMode.MIXED)

        assert namespace.symbols == ("a", "A", "1")
        assert namespace.size() == 3

    def test_verbatim_alphabet(self):
        """Test that no case mode uses the symbols as given."""
        namespace = NameSpace(alphabet="aB-", length=1)

        assert namespace.symbols == ("a", "B", "-")

    def test_size_is_idempotent(self):
        """Test that computing the size twice gives the same value without changing the model."""
        namespace = NameSpace(alphabet="abc", length=3, case_mode=CaseMode.MIXED)
        before = namespace.model_dump()

        first = namespace.size()
        second = namespace.size()

        assert first == second == 6**3
        assert namespace.model_dump() == before

    def test_huge_space_is_effectively_infinite(self):
        """Test that spaces too large for ratio decisions report infinity."""
        namespace = NameSpace(alphabet=string.ascii_letters + string.digits + "-_", length=20)

        assert namespace.size() == 64**20
        assert math.isinf(namespace.effective_size())

    def test_small_space_effective_size_is_exact(self):
        """Test that ordinary spaces keep their exact size."""
        namespace = NameSpace(alphabet="ab", length=3)

        assert namespace.effective_size() == 8


class TestNameSpaceValidation:
    """Tests for NameSpace parameter validation."""

    def test_empty_alphabet_raises(self):
        """Test that an empty alphabet is rejected."""
        with pytest.raises(ConfigError, match="empty"):
            NameSpace(alphabet="", length=3)

    def test_zero_length_raises(self):
        """Test that a zero name length is rejected."""
        with pytest.raises(ConfigError, match="at least 1"):
            NameSpace(alphabet="abc", length=0)


class TestNameSpaceGeneration:
    """Tests for drawing and enumerating names."""

    def test_random_name_uses_alphabet_and_length(self):
        """Test that random names have the right length and symbols."""
        namespace = NameSpace(alphabet="xyz", length=6)
        rng = random.Random(1)

        for _ in range(50):
            name = namespace.random_name(rng)
            assert len(name) == 6
            assert set(name) <= {"x", "y", "z"}

    def test_random_name_is_reproducible_with_seed(self):
        """Test that the same seed produces the same names."""
        namespace = NameSpace(alphabet=string.digits, length=8)

        first = [namespace.random_name(random.Random(3)) for _ in range(3)]
        second = [namespace.random_name(random.Random(3)) for _ in range(3)]

        assert first == second

    def test_enumerate_names(self):
        """Test that every name is enumerated exactly once."""
        namespace = NameSpace(alphabet="ab", length=2)

        assert list(namespace.enumerate_names()) == ["aa", "ab", "ba", "bb"]

    def test_enumerate_count_matches_size(self):
        """Test that enumeration yields size() names."""
        namespace = NameSpace(alphabet="ab", length=3, case_mode=CaseMode.MIXED)

        names = list(namespace.enumerate_names())

        assert len(names) == len(set(names)) == namespace.size()


class TestResolveAlphabet:
    """Tests for preset character set resolution."""

    def test_letters_default_to_lower_case(self):
        """Test that case-aware presets default to lower case."""
        alphabet, case_mode = resolve_alphabet(CharSetSelection.LETTERS)

        assert alphabet == string.ascii_lowercase
        assert case_mode is CaseMode.LOWER

    def test_base64_is_verbatim(self):
        """Test that base64 has no case mode and 64 url-safe symbols."""
        alphabet, case_mode = resolve_alphabet(CharSetSelection.BASE64)

        assert len(alphabet) == 64
        assert "-" in alphabet and "_" in alphabet
        assert case_mode is None

    @pytest.mark.parametrize(
        "selection,case_mode",
        [
            (CharSetSelection.BASE16, CaseMode.MIXED),
            (CharSetSelection.NUMBERS, CaseMode.UPPER),
            (CharSetSelection.BASE64, CaseMode.LOWER),
            (CharSetSelection.CUSTOM, CaseMode.LOWER),
        ],
    )
    def test_incompatible_case_raises(self, selection, case_mode):
        """Test that unsupported preset and case combinations are rejected."""
        custom = "abc" if selection is CharSetSelection.CUSTOM else None

        with pytest.raises(ConfigError, match="incompatible"):
            resolve_alphabet(selection, custom, case_mode)

    def test_custom_requires_chars(self):
        """Test that the custom preset needs custom characters."""
        with pytest.raises(ConfigError, match="requires custom characters"):
            resolve_alphabet(CharSetSelection.CUSTOM)

    def test_custom_chars_require_custom_preset(self):
        """Test that custom characters are rejected for other presets."""
        with pytest.raises(ConfigError, match="cannot be used"):
            resolve_alphabet(CharSetSelection.LETTERS, "abc")

    def test_custom_chars_are_used(self):
        """Test that custom characters become the alphabet."""
        alphabet, case_mode = resolve_alphabet(CharSetSelection.CUSTOM, "ABCDabcd")

        assert alphabet == "ABCDabcd"
        assert case_mode is None


class TestValidateCustomChars:
    """Tests for custom character set validation."""

    @pytest.mark.parametrize("chars", ["ab/c", "a*b", "x\ny", 'q"'])
    def test_illegal_chars_raise(self, chars):
        """Test that filename-unsafe characters are rejected."""
        with pytest.raises(ConfigError, match="illegal characters"):
            validate_custom_chars(chars)

    def test_duplicate_chars_raise(self):
        """Test that duplicates are rejected and listed."""
        with pytest.raises(ConfigError, match="duplicate characters: 'a'"):
            validate_custom_chars("abca")

    def test_empty_raises(self):
        """Test that an empty set is rejected."""
        with pytest.raises(ConfigError, match="empty"):
            validate_custom_chars("")

    def test_valid_chars_pass(self):
        """Test that a valid set is returned unchanged."""
        assert validate_custom_chars("abc-_.") == "abc-_."
