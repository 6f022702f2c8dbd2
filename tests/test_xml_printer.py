import io
from types import SimpleNamespace

import pytest

from examtt_tools.xml_nodes import XMLComment, XMLElement, XMLText
from examtt_tools.xml_printer import XMLPrinter
from examtt_tools.xml_util import unescape


def _render(node, compact=False):
    printer = XMLPrinter(compact=compact)
    node.accept(printer)
    return printer.getvalue()


def _tree():
    root = XMLElement("a")
    child = root.insert_new_child_element("b")
    child.set_attribute("k", "v")
    root.insert_new_child_element("c").insert_new_child_element("d")
    return root


def test_empty_element():
    assert _render(XMLElement("a")) == "<a/>\n"


def test_nested_pretty_print():
    root = XMLElement("a")
    root.insert_new_child_element("b")
    assert _render(root) == "<a>\n    <b/>\n</a>\n"


def test_compact_is_pretty_without_layout_whitespace():
    pretty = _render(_tree())
    compact = _render(_tree(), compact=True)
    assert "\n" not in compact
    assert compact == pretty.replace("\n", "").replace("    ", "")


def test_text_escaped_and_round_trips():
    text = 'x<y & "z" > w'
    root = XMLElement("a")
    root.set_text(text)
    out = _render(root)
    assert out.startswith("<a>") and out.endswith("</a>\n")
    inner = out[len("<a>"):-len("</a>\n")]
    assert "<" not in inner
    assert '"' in inner and "&quot;" not in inner
    assert unescape(inner) == text


def test_attribute_value_escaped_and_round_trips():
    printer = XMLPrinter()
    value = "say \"hi\" & 'bye'"
    printer.open_element("a")
    printer.push_attribute("k", value)
    printer.close_element()
    out = printer.getvalue()
    assert "&quot;" in out and "&apos;" in out
    start = out.index('k="') + 3
    end = out.index('"', start)
    assert unescape(out[start:end]) == value


def test_numeric_and_bool_attributes():
    printer = XMLPrinter(compact=True)
    printer.open_element("a")
    printer.push_attribute("n", 5)
    printer.push_attribute("f", True)
    printer.close_element()
    out = printer.getvalue()
    assert 'n="5"' in out
    assert 'f="true"' in out


def test_cdata_written_verbatim():
    printer = XMLPrinter(compact=True)
    printer.open_element("a")
    printer.push_text("a<b&c", cdata=True)
    printer.close_element()
    assert "<![CDATA[a<b&c]]>" in printer.getvalue()


def test_comment_declaration_unknown():
    printer = XMLPrinter()
    printer.push_declaration("xml version")
    printer.push_comment(" note ")
    printer.push_unknown("DOCTYPE x")
    lines = printer.getvalue().split("\n")
    assert lines == ["<?xml version?>", "<!-- note -->", "<!DOCTYPE x>"]


def test_header_declaration():
    printer = XMLPrinter()
    printer.push_header(False, True)
    assert printer.getvalue() == '<?xml version="1.0"?>'


def test_document_bom_and_raw_entities():
    printer = XMLPrinter()
    document = SimpleNamespace(process_entities=False, has_bom=True)
    assert printer.visit_enter_document(document) is True
    root = XMLElement("a")
    root.set_text("1 < 2")
    root.accept(printer)
    assert printer.visit_exit_document(document) is True
    out = printer.getvalue()
    assert out.startswith("\ufeff")
    assert "1 < 2" in out


def test_element_with_comment_and_text_balances():
    root = XMLElement("r")
    root.insert_end_child(XMLComment("c"))
    root.insert_end_child(XMLText("t"))
    root.insert_new_child_element("e")
    assert root.accept(XMLPrinter()) is True
    out = _render(root)
    assert out.count("<r>") == out.count("</r>") == 1
    assert "<!--c-->" in out and "<e/>" in out


def test_initial_depth_indents():
    printer = XMLPrinter(depth=1)
    XMLElement("a").accept(printer)
    assert printer.getvalue().startswith("    <a")


def test_external_stream():
    stream = io.StringIO()
    printer = XMLPrinter(stream)
    XMLElement("a").accept(printer)
    assert stream.getvalue() == _render(XMLElement("a"))
    with pytest.raises(ValueError):
        printer.getvalue()


def test_errors():
    printer = XMLPrinter()
    with pytest.raises(ValueError):
        printer.close_element()
    with pytest.raises(ValueError):
        printer.push_attribute("k", "v")
    with pytest.raises(TypeError):
        printer.visit(XMLElement("a"))