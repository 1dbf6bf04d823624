"""Unit tests for the password policy and sanitization rules."""

import pytest

from qbs_identity.validation import (
    check_email_domain,
    check_password_policy,
    sanitize_name,
    sanitize_text,
    strip_markup,
    validate_country_code,
    validate_email,
)


class TestPasswordPolicy:
    def test_accepts_strong_password(self):
        assert check_password_policy("Secure-Pass1!") == "Secure-Pass1!"

    @pytest.mark.parametrize(
        "password",
        [
            "Sh0rt!",  # too short
            "alllowercase1!",  # no uppercase
            "ALLUPPERCASE1!",  # no lowercase
            "NoDigitsHere!",  # no digit
            "NoSymbols123",  # no symbol
        ],
    )
    def test_rejects_weak_passwords(self, password):
        with pytest.raises(ValueError):
            check_password_policy(password)

    def test_rejects_overlong_password(self):
        with pytest.raises(ValueError, match="between 8 and 128"):
            check_password_policy("Aa1!" + "x" * 125)

    def test_boundary_lengths_accepted(self):
        assert check_password_policy("Aa1!aaaa")
        assert check_password_policy("Aa1!" + "a" * 124)


class TestEmailRules:
    def test_validate_email_lowercases(self):
        assert validate_email("  A@B.com ") == "a@b.com"

    @pytest.mark.parametrize("value", ["", "not-an-email", "a@", "@b.com"])
    def test_validate_email_rejects(self, value):
        with pytest.raises(ValueError):
            validate_email(value)

    def test_blocked_domain(self):
        with pytest.raises(ValueError, match="Disposable"):
            check_email_domain("x@Mailinator.com", ["mailinator.com"])

    def test_allowed_domain(self):
        assert check_email_domain("x@mail.com", ["mailinator.com"]) == "x@mail.com"


class TestSanitization:
    def test_strip_markup_removes_script_blocks(self):
        assert strip_markup("Ada<script>alert(1)</script>") == "Ada"

    def test_strip_markup_removes_tags(self):
        assert strip_markup("<b>Ada</b>") == "Ada"

    def test_sanitize_name_trims(self):
        assert sanitize_name("  O'Brien-Smith ") == "O'Brien-Smith"

    def test_sanitize_name_strips_markup_before_checking(self):
        assert sanitize_name("<i>Ada</i>", "First name") == "Ada"

    @pytest.mark.parametrize("value", ["", "   ", "Ada1", "x" * 51, "<b></b>"])
    def test_sanitize_name_rejects(self, value):
        with pytest.raises(ValueError):
            sanitize_name(value, "First name")

    @pytest.mark.parametrize("value", ["A\nB", "A\tB", "Ada\r\nLovelace"])
    def test_sanitize_name_rejects_control_whitespace(self, value):
        with pytest.raises(ValueError, match="letters, spaces"):
            sanitize_name(value, "First name")

    def test_sanitize_name_allows_inner_spaces(self):
        assert sanitize_name("Mary Ann") == "Mary Ann"

    def test_sanitize_name_error_mentions_label(self):
        with pytest.raises(ValueError, match="Last name"):
            sanitize_name("R2D2", "Last name")

    def test_sanitize_text_escapes_leftovers(self):
        assert sanitize_text("Trinidad & Tobago") == "Trinidad &amp; Tobago"

    def test_sanitize_text_length(self):
        with pytest.raises(ValueError, match="exceed 5"):
            sanitize_text("abcdefg", max_length=5)

    def test_country_code_uppercased(self):
        assert validate_country_code(" de ") == "DE"

    @pytest.mark.parametrize("value", ["DEU", "D", "1A", ""])
    def test_country_code_rejects(self, value):
        with pytest.raises(ValueError):
            validate_country_code(value)
