from src.prompts.sanitizer import sanitize_for_ai


def test_strips_control_characters_but_keeps_line_breaks():
    assert sanitize_for_ai("a\x00b\x07c\x1bd\x7f", 50) == "abcd"
    assert sanitize_for_ai("line one\nline\ttwo", 50) == "line one\nline\ttwo"
    assert sanitize_for_ai("carriage\r\nreturn", 50) == "carriage\nreturn"


def test_trims_and_truncates():
    assert sanitize_for_ai("   padded   ", 50) == "padded"
    assert sanitize_for_ai("我" * 600, 500) == "我" * 500


def test_coerces_non_strings():
    assert sanitize_for_ai(None, 10) == ""
    assert sanitize_for_ai(7, 10) == "7"


def test_zero_length_limit():
    assert sanitize_for_ai("anything", 0) == ""
