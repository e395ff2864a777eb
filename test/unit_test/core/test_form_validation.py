import pytest

from booktalks_buddy.core.validation import (
    is_valid_uuid,
    sanitize_input,
    validate_book_title,
    validate_display_name,
    validate_email,
    validate_name_field,
    validate_optional_text,
    validate_phone,
    validate_required_text,
    validate_username,
    validate_uuid,
)


class TestSanitizeInput:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("<script>alert('x')</script>Hello", "Hello"),
            ("<b>bold</b> text", "bold text"),
            ('<a href="javascript:alert(1)">link</a>', "link"),
            ("javascript:alert(1)", "alert(1)"),
            ("click onclick=steal() here", "click steal() here"),
            ("  many   spaces\n\tand lines  ", "many spaces and lines"),
            (None, ""),
            ("", ""),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert sanitize_input(raw) == expected


class TestUsername:
    @pytest.mark.parametrize("value", ["abc", "reader_42", "Book-Worm", "a" * 30])
    def test_valid(self, value):
        result = validate_username(value)
        assert result.is_valid
        assert result.sanitized_value == value

    @pytest.mark.parametrize(
        "value,message",
        [
            ("", "Username is required"),
            ("ab", "at least 3"),
            ("a" * 31, "30 characters or less"),
            ("_reader", "must start with a letter or number"),
            ("no spaces", "can only contain"),
        ],
    )
    def test_invalid(self, value, message):
        result = validate_username(value)
        assert not result.is_valid
        assert message in result.error


class TestNameAndTitle:
    def test_name_field(self):
        assert validate_name_field("Mary-Jane O'Neil").is_valid
        assert "at least 6" in validate_name_field("Ann").error
        assert "can only contain letters" in validate_name_field("R2D2 Droid").error
        assert validate_name_field("", "First name").error == "First name is required"

    def test_book_title(self):
        assert validate_book_title("Dune: Messiah (1969)").is_valid
        assert "at least 6" in validate_book_title("Dune").error
        assert "100 characters or less" in validate_book_title("x" * 101).error
        assert validate_book_title("Title <with> #hash").error == "Book title contains invalid characters"

    def test_display_name_is_optional_but_capped(self):
        assert validate_display_name(None).is_valid
        assert validate_display_name("Reader").sanitized_value == "Reader"
        assert not validate_display_name("x" * 51).is_valid


class TestContactFields:
    def test_email_is_lowercased(self):
        result = validate_email("Reader@Example.COM")
        assert result.is_valid
        assert result.sanitized_value == "reader@example.com"

    @pytest.mark.parametrize("value", ["", "not-an-email", "a@b", "a b@c.de"])
    def test_invalid_email(self, value):
        assert not validate_email(value).is_valid

    def test_phone_keeps_digits(self):
        result = validate_phone("(555) 123-4567")
        assert result.is_valid
        assert result.sanitized_value == "5551234567"

    def test_phone_needs_ten_digits(self):
        assert "exactly 10 digits" in validate_phone("555-1234").error
        assert validate_phone("").error == "Phone number is required"


class TestFreeText:
    def test_optional_text(self):
        assert validate_optional_text(None, 10).sanitized_value == ""
        assert validate_optional_text("x" * 11, 10, "Bio").error == "Bio must be 10 characters or less"

    def test_required_text_rejects_blank_after_sanitizing(self):
        assert validate_required_text("   ", 100, "Title").error == "Title is required"
        assert validate_required_text("<i></i>", 100, "Title").error == "Title is required"
        assert validate_required_text(" Chapter 1 ", 100).sanitized_value == "Chapter 1"


class TestUuid:
    def test_valid_uuid(self):
        value = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
        assert validate_uuid(value).sanitized_value == value
        assert is_valid_uuid(value)

    @pytest.mark.parametrize("value", [None, "", "not-a-uuid", "1234"])
    def test_invalid_uuid(self, value):
        assert not is_valid_uuid(value)
        assert validate_uuid(value, "club ID").error == "Invalid club ID format"
