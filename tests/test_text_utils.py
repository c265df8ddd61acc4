from scent_trail.core.text_utils import is_stop_word, split_identifier, tokenize, tokenize_all


def test_split_identifier():
    assert split_identifier("parseXml2Json") == ["parse", "Xml", "2", "Json"]
    assert split_identifier("HTTPServer") == ["HTTP", "Server"]
    assert split_identifier("read_line_count") == ["read", "line", "count"]
    assert split_identifier("") == []


def test_tokenize_filters_noise():
    tokens = tokenize("public static int x = getLineCount(42, null);")

    assert tokens == ["line", "count"]


def test_tokenize_keeps_repeats():
    assert tokenize("cache cacheSize cache") == ["cache", "cache", "size", "cache"]


def test_stop_words():
    assert is_stop_word("String")
    assert is_stop_word(" null ")
    assert not is_stop_word("parser")
    assert tokenize_all(["the parser", "a lexer"]) == ["parser", "lexer"]
