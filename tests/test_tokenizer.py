import pytest

from cargo_hdk.tokenizer import tokenize


def test_empty_string():
    assert tokenize("") == []


def test_legacy_bracket_form():
    assert tokenize("[-G Ninja]") == ["-G", "Ninja"]


def test_legacy_bracket_form_ignores_quotes():
    assert tokenize('[-G "Visual Studio 16"]') == ["-G", '"Visual', "Studio", '16"']


def test_legacy_bracket_form_collapses_whitespace():
    assert tokenize("[  -G   Ninja  ]") == ["-G", "Ninja"]


def test_empty_brackets():
    assert tokenize("[]") == []


def test_plain_whitespace_split():
    assert tokenize("-G Ninja -DFOO=1") == ["-G", "Ninja", "-DFOO=1"]


def test_double_quoted_token_keeps_whitespace():
    assert tokenize('-G "Visual Studio 16"') == ["-G", "Visual Studio 16"]


def test_single_quoted_token_keeps_whitespace():
    assert tokenize("-G 'Unix Makefiles'") == ["-G", "Unix Makefiles"]


def test_adjacent_quoted_segments_concatenate():
    assert tokenize("'a'\"b\"") == ["ab"]


def test_quotes_inside_token_are_removed():
    assert tokenize('-DCMAKE_PREFIX_PATH="/opt/my lib"') == ["-DCMAKE_PREFIX_PATH=/opt/my lib"]


def test_other_quote_kind_is_literal_inside_quotes():
    assert tokenize("\"it's\" '\"x\"'") == ["it's", '"x"']


def test_leading_whitespace_is_skipped():
    assert tokenize("  -X") == ["-X"]


def test_whitespace_runs_do_not_produce_empty_tokens():
    assert tokenize("-A    -B\t\n-C  ") == ["-A", "-B", "-C"]


def test_unterminated_quote_takes_the_rest():
    assert tokenize('-G "Ninja Multi-Config') == ["-G", "Ninja Multi-Config"]


@pytest.mark.parametrize("raw", ["[-G Ninja", "-G Ninja]"])
def test_half_bracketed_is_not_legacy_form(raw):
    assert tokenize(raw) == raw.split()
