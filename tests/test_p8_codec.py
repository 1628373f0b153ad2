from __future__ import annotations

from pathlib import Path

import pytest

from conftest import SIGNATURE_LINE, demo_cart_text, make_cart_text
from picoeater.codecs.p8 import format_cart, parse_cart_text, read_cart, write_cart
from picoeater.core.errors import MalformedCartError
from picoeater.core.model import CartridgeDocument, Section, SectionKind


def test_parse_demo_cart_sections_and_tabs() -> None:
    doc = parse_cart_text(demo_cart_text())

    assert doc.preamble == "version 41\n"
    assert [t.index for t in doc.tabs] == [0, 1, 2]
    assert doc.tabs[0].payload == "-- main\nfunction _init()\n cls()\nend\n"
    assert doc.tabs[2].payload.startswith("-- splash screen\n")

    kinds = [s.kind for s in doc.sections if s.kind is not SectionKind.SCRIPT_TAB]
    assert kinds == [
        SectionKind.SPRITE,
        SectionKind.LABEL,
        SectionKind.FLAGS,
        SectionKind.MAP,
        SectionKind.SFX,
        SectionKind.MUSIC,
    ]
    assert doc.resource(SectionKind.MUSIC).payload == "00 41424344\n"


def test_format_reproduces_canonical_text_exactly() -> None:
    text = demo_cart_text()
    assert format_cart(parse_cart_text(text)) == text


def test_absent_and_empty_sections_are_distinguished() -> None:
    text = make_cart_text(["-- a\n"], sections=[("gfx", ""), ("sfx", "0001\n")])
    doc = parse_cart_text(text)

    assert doc.has(SectionKind.SPRITE)
    assert doc.resource(SectionKind.SPRITE).payload == ""
    assert doc.resource(SectionKind.MAP) is None
    assert not doc.has(SectionKind.MAP)

    out = format_cart(doc)
    assert out == text
    assert "__gfx__\n__sfx__\n" in out
    assert "__map__" not in out


def test_cart_without_lua_section_has_no_tabs() -> None:
    text = make_cart_text(None, sections=[("gfx", "00\n")])
    doc = parse_cart_text(text)

    assert doc.tabs == ()
    assert "__lua__" not in format_cart(doc)
    assert format_cart(doc) == text


def test_empty_lua_section_yields_one_empty_tab() -> None:
    doc = parse_cart_text(make_cart_text([""]))
    assert len(doc.tabs) == 1
    assert doc.tabs[0].payload == ""


def test_trailing_divider_yields_trailing_empty_tab() -> None:
    text = make_cart_text(["-- a\n", ""])
    doc = parse_cart_text(text)
    assert [t.payload for t in doc.tabs] == ["-- a\n", ""]
    assert format_cart(doc) == text


def test_missing_signature_is_malformed() -> None:
    with pytest.raises(MalformedCartError, match=r"signature"):
        parse_cart_text("version 41\n__lua__\nprint(1)\n")

    with pytest.raises(MalformedCartError, match=r"signature"):
        parse_cart_text("")


def test_duplicate_marker_is_malformed() -> None:
    text = make_cart_text(["-- a\n"], sections=[("gfx", "00\n"), ("map", "01\n"), ("gfx", "02\n")])
    with pytest.raises(MalformedCartError, match=r"__gfx__"):
        parse_cart_text(text)


def test_duplicate_other_marker_is_malformed() -> None:
    text = make_cart_text(["-- a\n"], sections=[("meta:title", "x\n"), ("meta:title", "y\n")])
    with pytest.raises(MalformedCartError, match=r"line 7"):
        parse_cart_text(text)


def test_resources_are_emitted_in_canonical_order() -> None:
    text = make_cart_text(["-- a\n"], sections=[("music", "m\n"), ("sfx", "s\n"), ("gfx", "g\n")])
    out = format_cart(parse_cart_text(text))

    assert out == make_cart_text(["-- a\n"], sections=[("gfx", "g\n"), ("sfx", "s\n"), ("music", "m\n")])


def test_other_sections_preserved_after_known_ones_sorted_by_name() -> None:
    text = make_cart_text(
        ["-- a\n"],
        sections=[("meta:zz", "z\n"), ("gfx", "g\n"), ("meta:title", "my game\nby me\n")],
    )
    doc = parse_cart_text(text)

    assert [s.name for s in doc.others] == ["meta:zz", "meta:title"]

    out = format_cart(doc)
    assert out.endswith("__gfx__\ng\n__meta:title__\nmy game\nby me\n__meta:zz__\nz\n")


def test_tab_order_reorders_script_region_only() -> None:
    doc = parse_cart_text(demo_cart_text())
    out = format_cart(doc, tab_order=[2, 0, 1])

    lua = out.split("__lua__\n", 1)[1].split("__gfx__\n", 1)[0]
    chunks = lua.split("-->8\n")
    assert [c.split("\n", 1)[0] for c in chunks] == ["-- splash screen", "-- main", "-- enemies"]
    assert out.endswith(demo_cart_text().split("__gfx__\n", 1)[1])


def test_tab_order_must_be_a_permutation() -> None:
    doc = parse_cart_text(demo_cart_text())
    with pytest.raises(ValueError, match=r"permutation"):
        format_cart(doc, tab_order=[0, 0, 1])


def test_writer_inserts_line_break_before_markers_and_dividers() -> None:
    doc = CartridgeDocument(
        preamble="version 41",
        sections=(
            Section(SectionKind.SCRIPT_TAB, "-- a\nprint(1)", index=0),
            Section(SectionKind.SCRIPT_TAB, "-- b\nprint(2)", index=1),
            Section(SectionKind.SPRITE, "00\n"),
        ),
    )
    assert format_cart(doc) == (
        SIGNATURE_LINE + "\nversion 41\n__lua__\n-- a\nprint(1)\n-->8\n-- b\nprint(2)\n__gfx__\n00\n"
    )


def test_lua_lines_that_look_like_markers_but_are_not() -> None:
    text = make_cart_text(['-- a\nx="__gfx__"\n__Foo__\n-->8 not a divider\n'])
    doc = parse_cart_text(text)

    assert len(doc.tabs) == 1
    assert not doc.has(SectionKind.SPRITE)
    assert format_cart(doc) == text


def test_write_cart_is_deterministic_and_preserves_bytes(tmp_path: Path) -> None:
    src = tmp_path / "src.p8"
    src.write_bytes(demo_cart_text().encode("utf-8"))
    doc = read_cart(src)

    p1 = tmp_path / "a.p8"
    p2 = tmp_path / "b.p8"
    write_cart(p1, doc)
    write_cart(p2, doc)

    assert p1.read_bytes() == p2.read_bytes() == src.read_bytes()


def test_read_cart_names_path_in_malformed_error(tmp_path: Path) -> None:
    p = tmp_path / "bad.p8"
    p.write_text("not a cart\n", encoding="utf-8")
    with pytest.raises(MalformedCartError, match=r"bad\.p8"):
        read_cart(p)


def test_document_rejects_duplicate_resource_sections() -> None:
    with pytest.raises(ValueError, match=r"__map__"):
        CartridgeDocument(sections=(Section(SectionKind.MAP, "a"), Section(SectionKind.MAP, "b")))


def test_crlf_cart_formats_byte_identically() -> None:
    text = demo_cart_text().replace("\n", "\r\n")
    doc = parse_cart_text(text)

    assert doc.newline == "\r\n"
    assert doc.preamble == "version 41\r\n"
    assert doc.tabs[1].payload == "-- enemies\r\nfoes={}\r\n"
    assert format_cart(doc) == text
    assert format_cart(doc, tab_order=[2, 0, 1]).count("-->8\r\n") == 2


def test_crlf_writer_terminates_unterminated_payloads_with_crlf() -> None:
    doc = CartridgeDocument(
        preamble="version 41\r\n",
        sections=(
            Section(SectionKind.SCRIPT_TAB, "-- a\r\nx=1", index=0),
            Section(SectionKind.SCRIPT_TAB, "-- b", index=1),
            Section(SectionKind.MAP, "00"),
        ),
        newline="\r\n",
    )
    assert format_cart(doc) == (
        SIGNATURE_LINE + "\r\nversion 41\r\n__lua__\r\n-- a\r\nx=1\r\n-->8\r\n-- b\r\n__map__\r\n00"
    )


def test_document_rejects_unknown_newline() -> None:
    with pytest.raises(ValueError, match="newline"):
        CartridgeDocument(newline="\r")
