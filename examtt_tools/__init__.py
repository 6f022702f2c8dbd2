"""Exam timetabling helpers: index selection, bin packing, and an XML node tree with a printer."""

__version__ = "0.1.0"
__all__ = ["vector_utils", "xml_util", "xml_nodes", "xml_printer"]