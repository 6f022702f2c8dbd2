# examtt_tools

Building blocks for exam timetabling tools, in plain Python with no
third-party dependencies.

## Modules

- `examtt_tools.vector_utils` – index selection over sequences and the
  bin-packing searches used to pick rooms for an exam. Bins are
  `(index, size)` pairs, sorted by ascending size.
  - `indexes_where`, `indexes_where_all`, `indexes_equal_to` – indexes whose
    values satisfy a condition (`indexes_where_all` raises `ValueError` when
    the sequences differ in length).
  - `index_for_value` – first index of a value, or -1; a string is read as a
    leading integer.
  - `sorted_index_value_pairs` – pairs `(index, values[index])`, sorted.
  - `least_bins_required` – how many of the largest bins hold an item, and
    their total capacity.
  - `smallest_least_bins`, `all_least_bin_combinations`,
    `all_bin_combinations` – searches for bin combinations that hold an item.
  - `bin_result_key`, `sort_bin_results`, `subsets_of` – ordering and
    filtering of combination results.
  - `inline_key_values` – groups consecutive `(key, value)` rows into
    `(key, set_of_values)`.
- `examtt_tools.xml_util` – `XMLErrorCode`, the `XMLError` exception,
  entity and character-reference decoding (`unescape`,
  `character_reference`), `collapse_whitespace`, `read_bom`,
  `convert_utf32_to_utf8`, and the value conversions `to_str`, `to_int`,
  `to_unsigned`, `to_int64`, `to_unsigned64`, `to_bool`, `to_float`,
  `to_double` (these raise `ValueError` on bad input).
  `set_bool_serialization` chooses the words written for booleans.
- `examtt_tools.xml_nodes` – a DOM-style node tree: `XMLElement` (with
  ordered attributes, typed attribute and text accessors, child navigation
  and insertion), `XMLAttribute`, `XMLText` (plain or CDATA), `XMLComment`,
  `XMLDeclaration` and `XMLUnknown`. Nodes can be cloned and compared.
- `examtt_tools.xml_printer` – `XMLPrinter`, a visitor that writes a node
  tree (or calls to its `open_element` / `push_*` / `close_element`
  methods) to a text stream or an internal buffer read with `getvalue()`.
  Output is indented four spaces per level unless compact mode is chosen.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

```python
from examtt_tools.vector_utils import least_bins_required

# rooms as (index, capacity), sorted by capacity ascending
rooms = [(3, 20), (1, 30), (0, 50)]
count, capacity = least_bins_required(60, rooms)
print(count, capacity)  # 2 80
```

```python
from examtt_tools.xml_nodes import XMLElement
from examtt_tools.xml_printer import XMLPrinter

exams = XMLElement("exams")
exam = exams.insert_new_child_element("exam")
exam.set_attribute("id", 7)
exam.set_text("Algebra")

print(exam.int_attribute("id"), exam.get_text())  # 7 Algebra

printer = XMLPrinter()
exams.accept(printer)
print(printer.getvalue())
# <exams>
#     <exam id="7">Algebra</exam>
# </exams>
```

## What the package does not do

- It does not read XML text or files into a node tree, and has no document
  object to load or save files; trees are built in code and written out
  with `XMLPrinter`.
- It has no command-line program, no timetable solver, and no writers for
  run results or cost logs.