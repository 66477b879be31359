import csv

import pytest

from statement_ingest.tokenizer import tokenize


def test_quoted_field_keeps_embedded_delimiter():
    line = '12/09/2025,"-508.02","Direct Debit, Nissan Financial","+586.72"'
    fields = tokenize(line)
    assert fields == ["12/09/2025", "-508.02", "Direct Debit, Nissan Financial", "+586.72"]


def test_doubled_quote_is_literal():
    assert tokenize('a,"say ""hi""",c') == ["a", 'say "hi"', "c"]


def test_unterminated_quote_swallows_rest_of_line():
    assert tokenize('a,"b,c,d') == ["a", "b,c,d"]


def test_mid_field_quote_kept_literally():
    assert tokenize('ab"c,d') == ['ab"c', "d"]


def test_empty_fields_and_line_endings():
    assert tokenize("a,,b,\r\n") == ["a", "", "b", ""]
    assert tokenize("") == [""]


def test_custom_delimiter():
    assert tokenize('x;"y;z";w', ";") == ["x", "y;z", "w"]


def test_multi_character_delimiter_rejected():
    with pytest.raises(ValueError):
        tokenize("a,b", ",,")


def test_quote_after_text_then_quoted_field():
    assert tokenize('a"b,"c""d"') == ['a"b', 'c"d']


def test_delimiters_only():
    assert tokenize(",,") == ["", "", ""]


def test_oversized_field_returns_whole_line():
    previous = csv.field_size_limit(4)
    try:
        assert tokenize("a,abcdefgh,c") == ["a,abcdefgh,c"]
    finally:
        csv.field_size_limit(previous)
