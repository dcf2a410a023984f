"""Generic row renderer shared by every human readable table."""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

# wide enough that typical cells are not wrapped when output is piped
TABLE_WIDTH = 200


@dataclass
class TableSpec:
    """How one kind of record is projected into a table.

    Attributes:
        headers: Column headers, one per cell of each row
        extract: Function turning one record into its row of cells
        border: Draw a border around the table
    """

    headers: Sequence[str]
    extract: Callable[[Any], List[str]]
    border: bool = True


def table_rows(spec: TableSpec, records: Iterable[Any]) -> List[List[str]]:
    """Project records into rows of string cells, keeping their order."""
    return [["" if cell is None else str(cell) for cell in spec.extract(record)]
            for record in records]


def render_rows(headers: Sequence[str], rows: List[List[str]], border: bool = True,
                width: Optional[int] = TABLE_WIDTH) -> str:
    """Render already projected rows as a plain text table.

    Returns an empty string when there are no rows, callers skip empty tables
    instead of printing a header with no data.
    """
    if not rows:
        return ""

    if border:
        table = Table(box=box.ASCII, show_lines=False)
    else:
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)

    for header in headers:
        table.add_column(header, overflow="fold")
    for row in rows:
        table.add_row(*(Text(cell) for cell in row))

    console = Console(width=width, color_system=None, highlight=False, emoji=False)
    with console.capture() as capture:
        console.print(table)
    return capture.get()


def render_table(spec: TableSpec, records: Iterable[Any]) -> str:
    """Render records with the given spec, or an empty string if there are none."""
    return render_rows(spec.headers, table_rows(spec, records), spec.border)


def one_line_table(title: str, content: str) -> str:
    """A bordered single column table with one row, used for long text values."""
    return render_rows([title], [[content]])
