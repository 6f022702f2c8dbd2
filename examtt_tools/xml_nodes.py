"""The node tree of an XML document: elements, attributes, text and other nodes.

Nodes belong to a document (any object, or ``None`` for free-standing trees).
A node can only be inserted under a parent that belongs to the same document.
Inserting a node that already has a parent moves it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from .xml_util import (
    XMLError,
    XMLErrorCode,
    to_bool,
    to_double,
    to_float,
    to_int,
    to_int64,
    to_str,
    to_unsigned,
    to_unsigned64,
)

__all__ = [
    "ClosingType",
    "XMLNode",
    "XMLText",
    "XMLComment",
    "XMLDeclaration",
    "XMLUnknown",
    "XMLAttribute",
    "XMLElement",
]

DEFAULT_DECLARATION = 'xml version="1.0" encoding="UTF-8"'

_T = TypeVar("_T")


class ClosingType(Enum):
    """How an element tag was closed: ``<a>``, ``<a/>`` or ``</a>``."""

    OPEN = "open"
    CLOSED = "closed"
    CLOSING = "closing"


def _element_named(node: XMLNode, name: str | None) -> XMLElement | None:
    if isinstance(node, XMLElement) and (name is None or node.name == name):
        return node
    return None


def _first_element(nodes: Iterator[XMLNode], name: str | None) -> XMLElement | None:
    return next((e for e in (_element_named(n, name) for n in nodes) if e is not None), None)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else to_str(value)


class XMLNode:
    """A node with an ordered list of children."""

    def __init__(self, value: str = "", document: Any = None) -> None:
        self.document = document
        self.parent: XMLNode | None = None
        self._value = value
        self.parse_line_num = 0
        self._children: list[XMLNode] = []

    @property
    def value(self) -> str | None:
        """The node's text: the name of an element, the content of other nodes."""
        return self._value

    def set_value(self, value: str) -> None:
        """Replace the node's value."""
        self._value = value

    def children(self) -> list[XMLNode]:
        """Return the child nodes in document order."""
        return list(self._children)

    @property
    def first_child(self) -> XMLNode | None:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> XMLNode | None:
        return self._children[-1] if self._children else None

    @property
    def no_children(self) -> bool:
        return not self._children

    def _position(self) -> int:
        assert self.parent is not None
        return next(i for i, child in enumerate(self.parent._children) if child is self)

    def _following(self) -> Iterator[XMLNode]:
        if self.parent is None:
            return iter(())
        return iter(self.parent._children[self._position() + 1:])

    def _preceding(self) -> Iterator[XMLNode]:
        if self.parent is None:
            return iter(())
        return reversed(self.parent._children[: self._position()])

    @property
    def next_sibling(self) -> XMLNode | None:
        return next(self._following(), None)

    @property
    def previous_sibling(self) -> XMLNode | None:
        return next(self._preceding(), None)

    def child_element_count(self, name: str | None = None) -> int:
        """Count the child elements, optionally only those with ``name``."""
        return sum(1 for child in self._children if _element_named(child, name) is not None)

    def shallow_clone(self, document: Any = None) -> XMLNode | None:
        """Copy this node without its children; plain nodes cannot be copied."""
        return None

    def shallow_equal(self, other: XMLNode) -> bool:
        """Compare this node with another, ignoring children."""
        return False

    def deep_clone(self, document: Any = None) -> XMLNode | None:
        """Copy this node and all its descendants into ``document``."""
        clone = self.shallow_clone(document)
        if clone is None:
            return None
        for child in self._children:
            child_clone = child.deep_clone(document)
            if child_clone is not None:
                clone.insert_end_child(child_clone)
        return clone

    def _unlink(self, child: XMLNode) -> None:
        if child.parent is not self:
            raise ValueError("node is not a child of this node")
        del self._children[child._position()]
        child.parent = None

    def delete_children(self) -> None:
        """Remove all children."""
        for child in self._children:
            child.parent = None
        self._children.clear()

    def delete_child(self, node: XMLNode) -> None:
        """Remove one child."""
        self._unlink(node)

    def _prepare_insert(self, node: XMLNode) -> None:
        if node.document is not self.document:
            raise ValueError("node belongs to a different document")
        if node.parent is not None:
            node.parent._unlink(node)

    def insert_end_child(self, node: _T) -> _T:
        """Append ``node`` as the last child and return it."""
        self._prepare_insert(node)
        self._children.append(node)
        node.parent = self
        return node

    def insert_first_child(self, node: _T) -> _T:
        """Insert ``node`` as the first child and return it."""
        self._prepare_insert(node)
        self._children.insert(0, node)
        node.parent = self
        return node

    def insert_after_child(self, after: XMLNode, node: _T) -> _T:
        """Insert ``node`` right after the child ``after`` and return it."""
        if node.document is not self.document:
            raise ValueError("node belongs to a different document")
        if after.parent is not self:
            raise ValueError("reference node is not a child of this node")
        if after is node:
            return node
        if after is self._children[-1]:
            return self.insert_end_child(node)
        self._prepare_insert(node)
        self._children.insert(after._position() + 1, node)
        node.parent = self
        return node

    def first_child_element(self, name: str | None = None) -> XMLElement | None:
        """Return the first child element, optionally with ``name``."""
        return _first_element(iter(self._children), name)

    def last_child_element(self, name: str | None = None) -> XMLElement | None:
        """Return the last child element, optionally with ``name``."""
        return _first_element(reversed(self._children), name)

    def next_sibling_element(self, name: str | None = None) -> XMLElement | None:
        """Return the next sibling element, optionally with ``name``."""
        return _first_element(self._following(), name)

    def previous_sibling_element(self, name: str | None = None) -> XMLElement | None:
        """Return the previous sibling element, optionally with ``name``."""
        return _first_element(self._preceding(), name)


class _LeafNode(XMLNode):
    """A node whose value is its whole content and which visitors see at once."""

    def __init__(self, value: str = "", document: Any = None) -> None:
        super().__init__(value, document)

    def shallow_clone(self, document: Any = None) -> XMLNode:
        target = document if document is not None else self.document
        return type(self)(self.value, target)

    def shallow_equal(self, other: XMLNode) -> bool:
        return isinstance(other, type(self)) and other.value == self.value

    def accept(self, visitor: Any) -> bool:
        return visitor.visit(self)


class XMLText(_LeafNode):
    """Character data, either plain or a CDATA section."""

    def __init__(self, value: str = "", document: Any = None, cdata: bool = False) -> None:
        super().__init__(value, document)
        self.cdata = cdata

    def shallow_clone(self, document: Any = None) -> XMLText:
        target = document if document is not None else self.document
        return XMLText(self.value, target, self.cdata)

    def shallow_equal(self, other: XMLNode) -> bool:
        return isinstance(other, XMLText) and other.value == self.value

    def accept(self, visitor: Any) -> bool:
        return visitor.visit(self)


class XMLComment(_LeafNode):
    """A ``<!-- ... -->`` comment."""

    def shallow_clone(self, document: Any = None) -> XMLComment:
        return super().shallow_clone(document)

    def shallow_equal(self, other: XMLNode) -> bool:
        return super().shallow_equal(other)

    def accept(self, visitor: Any) -> bool:
        return visitor.visit(self)


class XMLDeclaration(_LeafNode):
    """A ``<? ... ?>`` declaration."""

    def shallow_clone(self, document: Any = None) -> XMLDeclaration:
        return super().shallow_clone(document)

    def shallow_equal(self, other: XMLNode) -> bool:
        return super().shallow_equal(other)

    def accept(self, visitor: Any) -> bool:
        return visitor.visit(self)


class XMLUnknown(_LeafNode):
    """Any other ``<! ... >`` construct, such as a DTD, kept verbatim."""

    def shallow_clone(self, document: Any = None) -> XMLUnknown:
        return super().shallow_clone(document)

    def shallow_equal(self, other: XMLNode) -> bool:
        return super().shallow_equal(other)

    def accept(self, visitor: Any) -> bool:
        return visitor.visit(self)


@dataclass
class XMLAttribute:
    """A name/value pair on an element."""

    name: str
    value: str = ""
    parse_line_num: int = 0

    def _convert(self, converter: Callable[[str], _T]) -> _T:
        try:
            return converter(self.value)
        except ValueError as exc:
            raise XMLError(
                XMLErrorCode.XML_WRONG_ATTRIBUTE_TYPE, detail=f"attribute {self.name}"
            ) from exc

    def int_value(self) -> int:
        return self._convert(to_int)

    def unsigned_value(self) -> int:
        return self._convert(to_unsigned)

    def int64_value(self) -> int:
        return self._convert(to_int64)

    def unsigned64_value(self) -> int:
        return self._convert(to_unsigned64)

    def bool_value(self) -> bool:
        return self._convert(to_bool)

    def float_value(self) -> float:
        return self._convert(to_float)

    def double_value(self) -> float:
        return self._convert(to_double)

    def set_attribute(self, value: str | bool | int | float) -> None:
        """Set the value from text or from a boolean or number."""
        self.value = _as_text(value)


class XMLElement(XMLNode):
    """An element with a name, ordered attributes and children."""

    def __init__(self, name: str = "", document: Any = None) -> None:
        super().__init__(name, document)
        self.closing_type = ClosingType.OPEN
        self._attributes: dict[str, XMLAttribute] = {}

    @property
    def name(self) -> str:
        return self._value

    @name.setter
    def name(self, name: str) -> None:
        self._value = name

    @property
    def attributes(self) -> list[XMLAttribute]:
        """The attributes in the order they were added."""
        return list(self._attributes.values())

    def find_attribute(self, name: str) -> XMLAttribute | None:
        return self._attributes.get(name)

    def attribute(self, name: str, value: str | None = None) -> str | None:
        """Return the attribute's value; with ``value``, only if it matches."""
        found = self._attributes.get(name)
        if found is None:
            return None
        if value is None or found.value == value:
            return found.value
        return None

    def _typed_attribute(self, name: str, default: _T, read: Callable[[XMLAttribute], _T]) -> _T:
        found = self._attributes.get(name)
        if found is None:
            return default
        try:
            return read(found)
        except XMLError:
            return default

    def int_attribute(self, name: str, default: int = 0) -> int:
        return self._typed_attribute(name, default, XMLAttribute.int_value)

    def unsigned_attribute(self, name: str, default: int = 0) -> int:
        return self._typed_attribute(name, default, XMLAttribute.unsigned_value)

    def int64_attribute(self, name: str, default: int = 0) -> int:
        return self._typed_attribute(name, default, XMLAttribute.int64_value)

    def unsigned64_attribute(self, name: str, default: int = 0) -> int:
        return self._typed_attribute(name, default, XMLAttribute.unsigned64_value)

    def bool_attribute(self, name: str, default: bool = False) -> bool:
        return self._typed_attribute(name, default, XMLAttribute.bool_value)

    def double_attribute(self, name: str, default: float = 0.0) -> float:
        return self._typed_attribute(name, default, XMLAttribute.double_value)

    def float_attribute(self, name: str, default: float = 0.0) -> float:
        return self._typed_attribute(name, default, XMLAttribute.float_value)

    def set_attribute(self, name: str, value: str | bool | int | float) -> XMLAttribute:
        """Set an attribute, creating it at the end if it does not exist."""
        found = self._attributes.get(name)
        if found is None:
            found = self._attributes[name] = XMLAttribute(name)
        found.set_attribute(value)
        return found

    def delete_attribute(self, name: str) -> None:
        """Remove an attribute if present."""
        self._attributes.pop(name, None)

    def get_text(self) -> str | None:
        """Return the text of the first non-comment child, if it is text."""
        node = next((c for c in self._children if not isinstance(c, XMLComment)), None)
        return node.value if isinstance(node, XMLText) else None

    def set_text(self, value: str | bool | int | float) -> None:
        """Replace the leading text child, or insert one at the front."""
        text = _as_text(value)
        first = self.first_child
        if isinstance(first, XMLText):
            first.set_value(text)
        else:
            self.insert_first_child(XMLText(text, self.document))

    def _typed_text(self, default: _T, converter: Callable[[str], _T]) -> _T:
        first = self.first_child
        if not isinstance(first, XMLText):
            return default
        try:
            return converter(first.value)
        except ValueError:
            return default

    def int_text(self, default: int = 0) -> int:
        return self._typed_text(default, to_int)

    def unsigned_text(self, default: int = 0) -> int:
        return self._typed_text(default, to_unsigned)

    def int64_text(self, default: int = 0) -> int:
        return self._typed_text(default, to_int64)

    def unsigned64_text(self, default: int = 0) -> int:
        return self._typed_text(default, to_unsigned64)

    def bool_text(self, default: bool = False) -> bool:
        return self._typed_text(default, to_bool)

    def double_text(self, default: float = 0.0) -> float:
        return self._typed_text(default, to_double)

    def float_text(self, default: float = 0.0) -> float:
        return self._typed_text(default, to_float)

    def insert_new_child_element(self, name: str) -> XMLElement:
        return self.insert_end_child(XMLElement(name, self.document))

    def insert_new_comment(self, text: str) -> XMLComment:
        return self.insert_end_child(XMLComment(text, self.document))

    def insert_new_text(self, text: str) -> XMLText:
        return self.insert_end_child(XMLText(text, self.document))

    def insert_new_declaration(self, text: str | None = None) -> XMLDeclaration:
        value = text if text is not None else DEFAULT_DECLARATION
        return self.insert_end_child(XMLDeclaration(value, self.document))

    def insert_new_unknown(self, text: str) -> XMLUnknown:
        return self.insert_end_child(XMLUnknown(text, self.document))

    def shallow_clone(self, document: Any = None) -> XMLElement:
        target = document if document is not None else self.document
        clone = XMLElement(self.name, target)
        for attribute in self._attributes.values():
            clone.set_attribute(attribute.name, attribute.value)
        return clone

    def shallow_equal(self, other: XMLNode) -> bool:
        """Same name and the same number of attributes with equal values in order."""
        if not isinstance(other, XMLElement) or other.name != self.name:
            return False
        mine, theirs = self.attributes, other.attributes
        return len(mine) == len(theirs) and all(
            a.value == b.value for a, b in zip(mine, theirs)
        )

    def accept(self, visitor: Any) -> bool:
        if visitor.visit_enter_element(self):
            for child in self.children():
                if not child.accept(visitor):
                    break
        return visitor.visit_exit_element(self)