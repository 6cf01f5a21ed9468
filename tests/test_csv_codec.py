import io

import pytest

from pgcopystream import errors
from pgcopystream.csv_codec import parse_line, generate_line, CsvCopyWriter


def test_parse_simple_line():
    assert parse_line('1,foo,bar') == ['1', 'foo', 'bar']


def test_parse_keeps_empty_fields_as_none():
    assert parse_line('1,,3,') == ['1', None, '3', None]


def test_parse_quoted_delimiter_and_newline():
    assert parse_line('1,"a,b","line\nbreak"') == ['1', 'a,b', 'line\nbreak']


def test_parse_escaped_quote():
    assert parse_line('"say ""hi""",x') == ['say "hi"', 'x']


def test_parse_custom_delimiter():
    assert parse_line('a;b;"c;d"', ';') == ['a', 'b', 'c;d']


def test_parse_custom_quote():
    assert parse_line("a|'b|c'", '|', "'") == ['a', 'b|c']


def test_parse_empty_line():
    assert parse_line('') == []


def test_unbalanced_quotes():
    with pytest.raises(errors.EncodingFailure) as info:
        parse_line('1,"unterminated')
    assert info.value.line == '1,"unterminated'


def test_two_records_in_one_line():
    with pytest.raises(errors.EncodingFailure):
        parse_line('1,2\n3,4\n')


def test_generate_line():
    assert generate_line(['1', None, 'a,b', 'say "hi"']) == '1,,"a,b","say ""hi"""\n'


def test_generate_line_custom_delimiter():
    assert generate_line(['1', 'a'], ';') == '1;a\n'


@pytest.mark.parametrize('line, delimiter', [
    ('1,foo,"a,b"', ','),
    ('x;"multi\nline";;z', ';'),
    ('"a ""quoted"" word"\tb', '\t'),
])
def test_generate_preserves_parsed_values(line, delimiter):
    fields = parse_line(line, delimiter)
    assert parse_line(generate_line(fields, delimiter), delimiter) == fields


def test_csv_writer_with_header():
    buf = io.StringIO()
    writer = CsvCopyWriter(buf, delimiter=';', header=['id', 'name'])
    writer.start()
    writer.write([1, 'a;b'])
    writer.write([2, None])
    writer.finish()
    assert buf.getvalue() == 'id;name\n1;"a;b"\n2;\n'
    assert writer.rows == 2
    assert not buf.closed


def test_csv_writer_closes_handle():
    buf = io.StringIO()
    writer = CsvCopyWriter(buf, close_handle=True)
    writer.start()
    writer.finish()
    assert buf.closed


def test_quoted_empty_field_is_empty_string():
    assert parse_line('1,"",b') == ['1', '', 'b']
    assert parse_line('"",') == ['', None]


def test_empty_string_and_null_round_trip():
    fields = parse_line('1,"",,b')
    assert fields == ['1', '', None, 'b']
    assert generate_line(fields) == '1,"",,b\n'


def test_generate_empty_string_is_quoted():
    assert generate_line(['', None], ';', "'") == "'';\n"


def test_csv_writer_rejects_unsafe_header():
    writer = CsvCopyWriter(io.StringIO(), header=['id', 'a,b'])
    with pytest.raises(errors.ConfigurationError):
        writer.start()
