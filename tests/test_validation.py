import pytest

from utils.validation import (
    check_text_safety,
    clean_text,
    logical_length,
    normalize_content,
    normalize_title,
    parse_category_ids,
    validate_category_selection,
    validate_comment_content,
    validate_email,
    validate_password,
    validate_post_content,
    validate_post_title,
    validate_username,
)


def test_logical_length_counts_code_points():
    assert logical_length("🔒💪") == 2
    assert logical_length("Привет") == 6
    assert logical_length("") == 0


class TestCleanText:
    def test_strips_control_characters_but_keeps_whitespace(self):
        assert clean_text("a\x00b\x07c\x7fd\x85e") == "abcde"
        assert clean_text("line\tone\r\nline two\n") == "line\tone\r\nline two\n"

    def test_strips_invisible_formatting(self):
        assert clean_text("a\u2060b\u2064c\ufeffd") == "abcd"

    def test_keeps_zero_width_characters(self):
        assert clean_text("a\u200bb") == "a\u200bb"

    def test_caps_combining_marks_per_base_character(self):
        assert clean_text("e" + "\u0301" * 5) == "e\u0301\u0301"

    def test_combining_counter_resets_on_base_character(self):
        raw = "e\u0301\u0301\u0301a\u0301\u0301\u0301"
        assert clean_text(raw) == "e\u0301\u0301a\u0301\u0301"

    def test_never_trims(self):
        assert clean_text("  padded  ") == "  padded  "

    def test_empty_input(self):
        assert clean_text(None) == ""
        assert clean_text("") == ""


class TestTextSafety:
    def test_plain_text_is_safe(self):
        assert check_text_safety("Hello, world!") == (True, "")

    def test_rejects_long_combining_runs(self):
        ok, reason = check_text_safety("e" + "\u0301" * 6)
        assert not ok
        assert reason == "Text contains excessive special characters that may break display"

    def test_allows_five_combining_marks(self):
        assert check_text_safety("e" + "\u0301" * 5)[0]

    def test_rejects_suspicious_letter_floods(self):
        assert check_text_safety("í" * 11) == (False, "Text contains suspicious character patterns")
        assert check_text_safety("í" * 10)[0]

    def test_rejects_zero_width_characters(self):
        assert check_text_safety("hidden\u200dtext") == (False, "Text contains invisible characters")


class TestUsername:
    @pytest.mark.parametrize("username", ["alice", "bob_01", "x-y-z", "a" * 50])
    def test_valid(self, username):
        assert validate_username(username) == (True, "")

    @pytest.mark.parametrize(
        ("username", "reason"),
        [
            ("", "Username is required"),
            ("ab", "Username must be at least 3 characters"),
            ("a" * 51, "Username must be no more than 50 characters"),
            ("john doe", "Username cannot contain spaces"),
            ("alice!", "Username can only contain letters, numbers, underscores, and hyphens"),
            ("ali\u200bce", "Text contains invisible characters"),
        ],
    )
    def test_invalid(self, username, reason):
        assert validate_username(username) == (False, reason)

    def test_control_characters_are_cleaned_first(self):
        assert validate_username("ali\x00ce") == (True, "")


class TestEmail:
    def test_valid(self):
        assert validate_email("user.name+tag@example.co") == (True, "")

    @pytest.mark.parametrize(
        ("email", "reason"),
        [
            ("", "Email is required"),
            ("user @example.com", "Email cannot contain spaces"),
            ("user@example", "Invalid email format (must include domain like @example.com)"),
            ("user@example.c", "Invalid email format (must include domain like @example.com)"),
            ("a" * 90 + "@example.com", "Email must be no more than 100 characters"),
        ],
    )
    def test_invalid(self, email, reason):
        assert validate_email(email) == (False, reason)


class TestPassword:
    def test_valid(self):
        assert validate_password("Secr3t!pass") == (True, "")
        assert validate_password("Password123!") == (True, "")
        assert validate_password("Aa1!" + "x" * 124) == (True, "")

    @pytest.mark.parametrize(
        ("password", "reason"),
        [
            ("Sh0rt!", "Password must be at least 8 characters"),
            ("Aa1!" + "x" * 125, "Password must be no more than 128 characters"),
            ("Secr3t !pass", "Password cannot contain spaces"),
            ("secr3t!pass", "Password must contain at least one uppercase letter"),
            ("SECR3T!PASS", "Password must contain at least one lowercase letter"),
            ("Secret!pass", "Password must contain at least one number"),
            ("Secr3tpass1", "Password must contain at least one special character (!@#$%^&*)"),
        ],
    )
    def test_invalid(self, password, reason):
        assert validate_password(password) == (False, reason)

    def test_only_the_space_character_is_forbidden(self):
        assert validate_password("Pass word123!") == (False, "Password cannot contain spaces")
        assert validate_password("Passw\tord1!") == (True, "")


class TestPostTitle:
    def test_valid(self):
        assert validate_post_title("Hello world") == (True, "")

    def test_emoji_count_as_single_characters(self):
        assert validate_post_title("🔒💪🔒") == (True, "")

    def test_line_breaks_become_spaces(self):
        assert normalize_title("Hello\r\nbig\tworld") == "Hello big world"
        assert validate_post_title("Hello\nworld") == (True, "")

    @pytest.mark.parametrize(
        ("title", "reason"),
        [
            ("", "Title is required"),
            ("   ", "Title is required"),
            ("  Hello", "Title cannot have spaces at the beginning or end"),
            ("Hello\n", "Title cannot have spaces at the beginning or end"),
            ("Hi", "Title must be at least 3 characters"),
            ("a" * 256, "Title must be no more than 255 characters"),
        ],
    )
    def test_invalid(self, title, reason):
        assert validate_post_title(title) == (False, reason)

    def test_length_limit_is_inclusive(self):
        assert validate_post_title("a" * 255) == (True, "")


class TestPostContent:
    def test_normalization(self):
        assert normalize_content("a\tb\r\nc\rd") == "a    b\nc\nd"

    def test_valid_multiline(self):
        assert validate_post_content("First line\nsecond line") == (True, "")

    @pytest.mark.parametrize(
        ("content", "reason"),
        [
            ("", "Content is required"),
            ("too short", "Content must be at least 10 characters"),
            (" leading space text", "Content cannot have spaces at the beginning or end"),
            ("a" * 10_001, "Content must be no more than 10,000 characters"),
            ("Looks fine\u200b but is not", "Text contains invisible characters"),
        ],
    )
    def test_invalid(self, content, reason):
        assert validate_post_content(content) == (False, reason)


class TestCommentContent:
    def test_valid(self):
        assert validate_comment_content("Great point, thanks!") == (True, "")

    @pytest.mark.parametrize(
        ("content", "reason"),
        [
            ("", "Comment content is required"),
            ("short", "Comment must be at least 10 characters"),
            ("a" * 5_001, "Comment must be no more than 5,000 characters"),
        ],
    )
    def test_invalid(self, content, reason):
        assert validate_comment_content(content) == (False, reason)


class TestCategorySelection:
    def test_largest_storable_id(self):
        assert validate_category_selection([str(2**63 - 1)]) == (True, "")
        assert not validate_category_selection([str(2**63)])[0]

    def test_valid_with_duplicates(self):
        assert validate_category_selection(["1", "2", "1"]) == (True, "")
        assert parse_category_ids(["3", "1", "3"]) == [3, 1]

    @pytest.mark.parametrize(
        ("values", "reason"),
        [
            ([], "At least one category is required"),
            (None, "At least one category is required"),
            (["1", "2", "3", "4", "5", "6"], "You can select up to 5 categories"),
            ([""], "Invalid category selection: empty category ID"),
            (["abc"], "Invalid category ID format: 'abc' must be a number"),
            (["1.5"], "Invalid category ID format: '1.5' must be a number"),
            (["0"], "Invalid category ID: 0 (must be positive)"),
            (["-3"], "Invalid category ID: -3 (must be positive)"),
            (
                ["99999999999999999999"],
                "Invalid category ID format: '99999999999999999999' must be a number",
            ),
        ],
    )
    def test_invalid(self, values, reason):
        assert validate_category_selection(values) == (False, reason)
