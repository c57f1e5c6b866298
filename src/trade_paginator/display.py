"""Console rendering of trade pages."""

from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.text import Text


_MISSING = object()


def render_page(page: List[Dict[str, Any]], title: Optional[str] = None) -> Table:
    """Build a table with an index column plus one column per record key."""
    columns: List[str] = []
    for record in page:
        for key in record:
            if key not in columns:
                columns.append(key)

    table = Table(title=title)
    table.add_column("(index)", style="dim", justify="right")
    for column in columns:
        table.add_column(column, style="cyan" if column == 'tid' else None, no_wrap=(column == 'tid'))

    for index, record in enumerate(page):
        table.add_row(Text(str(index)), *[_cell(record.get(column, _MISSING)) for column in columns])

    return table


def _cell(value: Any) -> Text:
    if value is _MISSING:
        return Text("")
    # Text, not str: payload must not be parsed as console markup
    if isinstance(value, str):
        return Text(f"'{value}'")
    return Text(str(value))
