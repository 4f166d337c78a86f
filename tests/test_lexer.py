import io

from ling.errors import Diagnostics
from ling.lexer import tokenize


def scan(source):
    diagnostics = Diagnostics(stream=io.StringIO())
    return tokenize(source, diagnostics), diagnostics


def test_operators_and_punctuation():
    tokens, diagnostics = scan('(){},.-+;*/ ! != = == < <= > >=')
    assert [t.type for t in tokens] == [
        '(', ')', '{', '}', ',', '.', '-', '+', ';', '*', '/',
        '!', '!=', '=', '==', '<', '<=', '>', '>=', 'EOF',
    ]
    assert not diagnostics.had_error


def test_keywords_and_identifiers():
    tokens, _ = scan('and andy _x x1 while nil')
    assert [t.type for t in tokens] == ['and', 'IDENT', 'IDENT', 'IDENT', 'while', 'nil', 'EOF']
    assert tokens[1].lexeme == 'andy'


def test_numbers_are_floats():
    tokens, _ = scan('123 4.5 6.')
    assert [(t.type, t.literal) for t in tokens] == [
        ('NUMBER', 123.0), ('NUMBER', 4.5), ('NUMBER', 6.0), ('.', None), ('EOF', None),
    ]
    assert isinstance(tokens[0].literal, float)


def test_strings_may_span_lines():
    tokens, _ = scan('"a\nb" x')
    assert tokens[0].type == 'STRING'
    assert tokens[0].literal == 'a\nb'
    assert tokens[0].lexeme == '"a\nb"'
    assert tokens[1].line == 2


def test_comments_and_line_numbers():
    tokens, _ = scan('1 // ignored ( "\n2')
    assert [(t.type, t.line) for t in tokens] == [('NUMBER', 1), ('NUMBER', 2), ('EOF', 2)]


def test_slash_without_comment():
    tokens, _ = scan('4 / 2')
    assert [t.type for t in tokens] == ['NUMBER', '/', 'NUMBER', 'EOF']


def test_unterminated_string_reports_and_emits_nothing():
    tokens, diagnostics = scan('"abc')
    assert [t.type for t in tokens] == ['EOF']
    assert diagnostics.messages == ['[line 1] Error: Unterminated string.']


def test_unexpected_characters_do_not_stop_scanning():
    tokens, diagnostics = scan('@ 1\n#')
    assert [t.type for t in tokens] == ['NUMBER', 'EOF']
    assert diagnostics.messages == [
        '[line 1] Error: Unexpected character.',
        '[line 2] Error: Unexpected character.',
    ]
    assert diagnostics.had_error
