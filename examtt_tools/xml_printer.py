"""Serialisation of XML node trees and hand-built documents to text."""

from __future__ import annotations

import io
from typing import Any, TextIO

from .xml_nodes import XMLComment, XMLDeclaration, XMLElement, XMLNode, XMLText, XMLUnknown
from .xml_util import BOM_TEXT, ENTITIES, to_str

__all__ = ["XMLPrinter"]

INDENT = "    "

_ENTITY_TABLE = {ord(char): f"&{name};" for name, char in ENTITIES}
_RESTRICTED_TABLE = {
    ord(char): f"&{name};" for name, char in ENTITIES if char in "&<>"
}


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else to_str(value)


class XMLPrinter:
    """Writes XML either to a text stream or to an internal buffer.

    The printer is a visitor: pass it to a node's or document's ``accept``
    method, or call the ``push_*`` and ``open``/``close`` methods directly to
    build output without a tree. In normal mode every element starts on its
    own line, indented four spaces per level; compact mode adds no whitespace.
    """

    def __init__(self, file: TextIO | None = None, compact: bool = False, depth: int = 0) -> None:
        self._owns_buffer = file is None
        self._out: TextIO = io.StringIO() if file is None else file
        self.compact = compact
        self._depth = depth
        self._element_just_opened = False
        self._first_element = True
        self._text_depth = -1
        self._stack: list[str] = []
        self.process_entities = True

    def getvalue(self) -> str:
        """Return everything printed so far to the internal buffer."""
        if not self._owns_buffer:
            raise ValueError("printer writes to an external stream")
        assert isinstance(self._out, io.StringIO)
        return self._out.getvalue()

    def _write(self, text: str) -> None:
        self._out.write(text)

    def _print_space(self, depth: int) -> None:
        self._write(INDENT * depth)

    def _print_string(self, text: str, restricted: bool) -> None:
        if self.process_entities:
            text = text.translate(_RESTRICTED_TABLE if restricted else _ENTITY_TABLE)
        self._write(text)

    def _seal_element_if_just_opened(self) -> None:
        if self._element_just_opened:
            self._element_just_opened = False
            self._write(">")

    def _prepare_for_new_node(self, compact_mode: bool) -> None:
        self._seal_element_if_just_opened()
        if compact_mode:
            return
        if self._first_element:
            self._print_space(self._depth)
        elif self._text_depth < 0:
            self._write("\n")
            self._print_space(self._depth)
        self._first_element = False

    def push_header(self, write_bom: bool, write_declaration: bool) -> None:
        """Write a byte-order mark and/or a minimal XML declaration."""
        if write_bom:
            self._write(BOM_TEXT)
        if write_declaration:
            self.push_declaration('xml version="1.0"')

    def open_element(self, name: str, compact_mode: bool | None = None) -> None:
        """Start an element; attributes may follow until content is written."""
        compact_mode = self.compact if compact_mode is None else compact_mode
        self._prepare_for_new_node(compact_mode)
        self._stack.append(name)
        self._write(f"<{name}")
        self._element_just_opened = True
        self._depth += 1

    def push_attribute(self, name: str, value: str | bool | int | float) -> None:
        """Add an attribute to the element just opened."""
        if not self._element_just_opened:
            raise ValueError("attributes must follow an opened element")
        self._write(f' {name}="')
        self._print_string(_as_text(value), restricted=False)
        self._write('"')

    def close_element(self, compact_mode: bool | None = None) -> None:
        """Close the innermost open element."""
        if not self._stack:
            raise ValueError("no open element to close")
        compact_mode = self.compact if compact_mode is None else compact_mode
        self._depth -= 1
        name = self._stack.pop()
        if self._element_just_opened:
            self._write("/>")
        else:
            if self._text_depth < 0 and not compact_mode:
                self._write("\n")
                self._print_space(self._depth)
            self._write(f"</{name}>")
        if self._text_depth == self._depth:
            self._text_depth = -1
        if self._depth == 0 and not compact_mode:
            self._write("\n")
        self._element_just_opened = False

    def push_text(self, text: str | bool | int | float, cdata: bool = False) -> None:
        """Write text content, escaped, or verbatim inside a CDATA section."""
        self._text_depth = self._depth - 1
        self._seal_element_if_just_opened()
        text = _as_text(text)
        if cdata:
            self._write(f"<![CDATA[{text}]]>")
        else:
            self._print_string(text, restricted=True)

    def push_comment(self, comment: str) -> None:
        self._prepare_for_new_node(self.compact)
        self._write(f"<!--{comment}-->")

    def push_declaration(self, value: str) -> None:
        self._prepare_for_new_node(self.compact)
        self._write(f"<?{value}?>")

    def push_unknown(self, value: str) -> None:
        self._prepare_for_new_node(self.compact)
        self._write(f"<!{value}>")

    def visit_enter_document(self, document: Any) -> bool:
        """Take over the document's entity setting and write its byte-order mark."""
        self.process_entities = getattr(document, "process_entities", True)
        if getattr(document, "has_bom", False):
            self.push_header(True, False)
        return True

    def visit_exit_document(self, document: Any) -> bool:
        return True

    def visit_enter_element(self, element: XMLElement) -> bool:
        self.open_element(element.name, self.compact)
        for attribute in element.attributes:
            self.push_attribute(attribute.name, attribute.value)
        return True

    def visit_exit_element(self, element: XMLElement) -> bool:
        self.close_element(self.compact)
        return True

    def visit(self, node: XMLNode) -> bool:
        """Print a text, comment, declaration or unknown node."""
        if isinstance(node, XMLText):
            self.push_text(node.value or "", node.cdata)
        elif isinstance(node, XMLComment):
            self.push_comment(node.value or "")
        elif isinstance(node, XMLDeclaration):
            self.push_declaration(node.value or "")
        elif isinstance(node, XMLUnknown):
            self.push_unknown(node.value or "")
        else:
            raise TypeError(f"cannot print {type(node).__name__}")
        return True