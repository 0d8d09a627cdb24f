#!/usr/bin/env python3
"""
Name: tabcut
Description: select columns of a delimited table by position
License: perl
"""

import sys
import os
import argparse
import re

VERSION = '1.0'
DEFAULT_DELIMITER = '\t'

# Universal newlines: \r\n must be tried before the bare \r.
LINE_BREAK = re.compile(r'\r\n|\r|\n')


# --- Errors ---

class TabcutError(Exception):
    """Base class for every failure the tool reports to the user."""


class EmptyInputError(TabcutError):
    def __init__(self):
        super().__init__("input is empty, no header line")


class DelimiterError(TabcutError):
    def __init__(self):
        super().__init__("the delimiter must not be empty")


class IndexOutOfRangeError(TabcutError):
    """A requested column lies outside the header."""
    def __init__(self, index, width):
        self.index = index
        self.width = width
        if width:
            valid = f"valid: 0..{width - 1}"
        else:
            valid = "table has no columns"
        super().__init__(f"column index {index} out of range ({valid})")


class RowWidthError(TabcutError):
    """A data row is too short to hold a requested column."""
    def __init__(self, row_number, index, width):
        self.row_number = row_number
        self.index = index
        self.width = width
        super().__init__(f"line {row_number}: has {width} field(s), no field at index {index}")


class InvalidFieldSpecError(TabcutError):
    def __init__(self, token, reason=None):
        self.token = token
        super().__init__(reason or f"invalid field list '{token}'")


class SourceReadError(TabcutError):
    def __init__(self, source, cause):
        self.source = source
        self.cause = cause
        reason = getattr(cause, 'strerror', None) or cause
        super().__init__(f"'{source}': {reason}")


# --- Table model ---

class Table:
    """
    An in-memory delimited table: a header row plus data rows.

    Columns and rows are stored as tuples behind read-only properties,
    so a Table never changes after construction; every transformation
    below returns a new Table.
    """
    __slots__ = ('_columns', '_rows', '_delimiter')

    def __init__(self, columns=(), rows=(), delimiter=DEFAULT_DELIMITER):
        self._columns = tuple(columns)
        self._rows = tuple(tuple(row) for row in rows)
        self._delimiter = delimiter

    @property
    def columns(self):
        return self._columns

    @property
    def rows(self):
        return self._rows

    @property
    def delimiter(self):
        return self._delimiter

    def __eq__(self, other):
        if not isinstance(other, Table):
            return NotImplemented
        return (self.columns, self.rows, self.delimiter) == \
               (other.columns, other.rows, other.delimiter)

    def __repr__(self):
        return f"Table(columns={self.columns!r}, rows={self.rows!r}, delimiter={self.delimiter!r})"


def split_lines(raw_text: str) -> list:
    """
    Splits text on \\n, \\r\\n or \\r with the terminators removed.
    A final terminator does not add an empty trailing line.
    """
    if not raw_text:
        return []
    lines = LINE_BREAK.split(raw_text)
    if lines[-1] == '':
        lines.pop()
    return lines


def parse(raw_text: str, delimiter: str = DEFAULT_DELIMITER) -> Table:
    """
    Parses delimited text into a Table. The first line is the header.

    Fields are split on every literal occurrence of the delimiter, so
    consecutive delimiters yield empty fields. Rows whose width differs
    from the header are kept as they are; project() reports them.
    """
    if not delimiter:
        raise DelimiterError()

    lines = split_lines(raw_text)
    if not lines:
        raise EmptyInputError()

    columns = lines[0].split(delimiter)
    rows = [line.split(delimiter) for line in lines[1:]]
    return Table(columns, rows, delimiter)


def project(table: Table, indices) -> Table:
    """
    Returns a new Table holding only the columns at the given zero-based
    indices, in that order. Indices may repeat and need not be sorted.
    """
    indices = list(indices)
    width = len(table.columns)

    # Validate everything against the header before building anything.
    for i in indices:
        if i < 0 or i >= width:
            raise IndexOutOfRangeError(i, width)

    rows = []
    # The header is line 1, so the first data row is line 2.
    for row_number, row in enumerate(table.rows, start=2):
        for i in indices:
            if i >= len(row):
                raise RowWidthError(row_number, i, len(row))
        rows.append([row[i] for i in indices])

    columns = [table.columns[i] for i in indices]
    return Table(columns, rows, table.delimiter)


def render(table: Table) -> str:
    """Joins the header and each row with the delimiter, one line each, no trailing newline."""
    lines = [table.delimiter.join(table.columns)]
    lines.extend(table.delimiter.join(row) for row in table.rows)
    return '\n'.join(lines)


# --- Command-line glue ---

def parse_field_list(spec: str) -> list:
    """
    Parses a field list such as "2", "1,3" or "1 3" into 1-based field
    numbers, keeping their order and any repeats.

    Space separates the list only when the spec holds a space and no comma;
    otherwise a comma does.
    """
    separator = ' ' if ' ' in spec and ',' not in spec else ','

    fields = []
    for part in spec.split(separator):
        part = part.strip()
        if not part: continue # Skip empty parts from doubled or trailing separators

        if not re.fullmatch(r'[0-9]+', part):
            raise InvalidFieldSpecError(part)
        num = int(part)
        if num == 0:
            raise InvalidFieldSpecError(part, "fields are numbered from 1")
        fields.append(num)

    if not fields:
        raise InvalidFieldSpecError(spec, f"no fields in field list '{spec}'")
    return fields


def read_source(path=None) -> str:
    """
    Reads a whole file, or standard input when path is None or '-'.
    Both are decoded as UTF-8, whatever the locale encoding is.
    """
    try:
        if path is None or path == '-':
            stdin_bytes = getattr(sys.stdin, 'buffer', None)
            if stdin_bytes is None: # Already-decoded text stream, e.g. io.StringIO
                return sys.stdin.read()
            return stdin_bytes.read().decode('utf-8')
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError('<stdin>' if path in (None, '-') else path, e) from e


def to_user_message(error: TabcutError) -> str:
    """Rewrites index-bearing errors with the 1-based field numbers the user typed."""
    if isinstance(error, IndexOutOfRangeError):
        if error.width:
            return f"field {error.index + 1} out of range (valid: 1..{error.width})"
        return f"field {error.index + 1} out of range (header has no fields)"
    if isinstance(error, RowWidthError):
        return (f"line {error.row_number}: has {error.width} field(s), "
                f"field {error.index + 1} is missing")
    return str(error)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='tabcut',
        description="Select columns of a delimited table, keeping the header row.",
        usage="%(prog)s -f list [-f list ...] [-d delim] [file]"
    )
    parser.add_argument('-f', '--fields', dest='field_lists', action='append', required=True,
                        metavar='LIST',
                        help="Fields to keep, numbered from 1, separated by commas or spaces. "
                             "May be repeated; order and repeats are kept.")
    parser.add_argument('-d', '--delimiter', default=DEFAULT_DELIMITER,
                        help="Use DELIM instead of TAB to split and join fields.")
    parser.add_argument('--version', action='version', version=f"%(prog)s {VERSION}")
    parser.add_argument('file', nargs='?', default=None,
                        help="File to process. Reads from stdin if none is given or it is '-'.")
    return parser


def main(argv=None):
    """Parses arguments, projects the table and prints it."""
    parser = build_parser()
    args = parser.parse_args(argv)
    program_name = os.path.basename(sys.argv[0]) or parser.prog

    try:
        if not args.delimiter:
            raise DelimiterError()

        # Field lists are checked before any input is read.
        fields = []
        for spec in args.field_lists:
            fields.extend(parse_field_list(spec))
        indices = [num - 1 for num in fields]

        raw_text = read_source(args.file)
        result = project(parse(raw_text, args.delimiter), indices)
        print(render(result))

    except TabcutError as e:
        print(f"{program_name}: {to_user_message(e)}", file=sys.stderr)
        sys.exit(1)
    except BrokenPipeError:
        # Downstream closed early (e.g. piped into head); nothing left to report.
        sys.stderr.close()
        sys.exit(0)

    sys.exit(0)


if __name__ == "__main__":
    main()
