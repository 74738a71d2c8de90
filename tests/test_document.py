"""Test document construction, serialization and file round-trips."""

import os

import pytest
from wrapview.document import (
    Document, DocumentDecodeError, Line, load_document, save_document,
)
from wrapview.segmenter import SENTINEL


def test_empty_text_gives_one_empty_line():
    doc = Document.from_text("")
    assert len(doc) == 1
    assert doc[0].raw == b""
    assert doc[0].cells == [SENTINEL]


def test_default_document_is_not_empty():
    doc = Document()
    assert len(doc) == 1
    assert doc.line(0).cells == [SENTINEL]


def test_lines_split_after_terminators():
    doc = Document.from_text("ab\ncd")
    assert len(doc) == 2
    assert doc[0].raw == b"ab\n"
    assert len(doc[0].cells) == 3  # a, b, newline
    assert doc[0].cells[-1].terminator
    assert doc[0].last_index == 2
    assert doc[1].cells[-1] == SENTINEL
    assert doc[1].raw == b"cd"
    assert len(doc[1].cells) == 3


def test_trailing_newline_opens_an_empty_last_line():
    doc = Document.from_text("a\n")
    assert len(doc) == 2
    assert doc[1].raw == b""
    assert doc[1].last_index == 0


def test_mixed_terminators():
    doc = Document.from_text("a\r\nb\rc\n")
    assert [line.raw for line in doc] == [b"a\r\n", b"b\r", b"c\n", b""]


def test_unicode_vertical_whitespace_breaks_lines():
    doc = Document.from_text("a\u2028b\x0cc")
    assert len(doc) == 3


def test_cell_bytes_add_up_to_raw_bytes():
    doc = Document.from_text("héllo\r\n你好 e\u0301\n")
    for line in doc:
        assert sum(cell.byte_len for cell in line.cells) == len(line.raw)


def test_total_width_counts_the_end_cell():
    doc = Document.from_text("a你\nb")
    assert doc[0].total_width == 1 + 2 + 1  # terminator
    assert doc[1].total_width == 1 + 1  # sentinel
    assert Line.empty().total_width == 1


def test_glyphs():
    line = Document.from_text("a\t你\n")[0]
    assert line.glyph(0) == b"a"
    assert line.glyph(1) == b""  # tab paints nothing
    assert line.glyph(2) == "你".encode("utf-8")
    assert line.glyph(3) == b" "  # terminator paints a blank
    assert Document.from_text("a")[0].glyph(1) == b""  # sentinel


def test_span_of_cells():
    line = Document.from_text("a你b")[0]
    assert list(line.spans())[:3] == [
        (0, 1, line.cells[0]),
        (1, 4, line.cells[1]),
        (4, 5, line.cells[2]),
    ]


@pytest.mark.parametrize("data", [
    b"",
    b"abc",
    b"\n",
    b"\n\n",
    b"a\r\nb\rc\n",
    b"no trailing newline\r\nmixed\n",
    b"\xef\xbb\xbfbom first",
    "héllo 你好 \U0001F468\u200d\U0001F469\u200d\U0001F467\u2028x\x85y\tz".encode("utf-8"),
])
def test_bytes_round_trip(data):
    assert Document.from_bytes(data).to_bytes() == data


def test_invalid_utf8_raises_decode_error():
    with pytest.raises(DocumentDecodeError) as excinfo:
        Document.from_bytes(b"ok\xff\xfe", path="bad.txt")
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
    assert "bad.txt" in str(excinfo.value)


def test_save_then_load_is_byte_identical(tmp_path):
    data = "first\r\nsecond\n\nthird 你好".encode("utf-8")
    source = tmp_path / "in.txt"
    source.write_bytes(data)

    doc = load_document(str(source))
    target = tmp_path / "out.txt"
    save_document(doc, str(target))

    assert target.read_bytes() == data


def test_save_overwrites_and_leaves_no_temp_files(tmp_path):
    target = tmp_path / "doc.txt"
    target.write_bytes(b"old content")
    save_document(Document.from_text("new\n"), str(target))

    assert target.read_bytes() == b"new\n"
    assert os.listdir(tmp_path) == ["doc.txt"]


def test_save_empty_document_writes_zero_bytes(tmp_path):
    target = tmp_path / "empty.txt"
    save_document(Document(), str(target))
    assert target.read_bytes() == b""


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(str(tmp_path / "missing.txt"))


def test_save_into_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        save_document(Document(), str(tmp_path / "nope" / "doc.txt"))
