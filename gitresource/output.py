"""
Output module for gitresource.

stdout carries exactly one JSON document per invocation, which is what
the pipeline engine parses. Humans can ask for a Rich table instead.

Usage:
    from gitresource.output import emit, emit_error

    emit([v.to_dict() for v in versions], pretty=False)
    emit_error("branch not found", type="ConfigError", exit_code=66)
"""

import json
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table


def _plain(data: Any) -> Any:
    """Convert objects with to_dict()/to_list() into JSON-ready data."""
    if hasattr(data, 'to_dict'):
        return data.to_dict()
    if hasattr(data, 'to_list'):
        return data.to_list()
    if isinstance(data, (list, tuple)):
        return [_plain(item) for item in data]
    return data


def emit(data: Any, pretty: bool = False, title: Optional[str] = None) -> None:
    """
    Emit a result as JSON, or as a table when pretty is set.

    Args:
        data: Dict, list of dicts, or objects with to_dict()
        pretty: Render a Rich table on stdout instead of JSON
        title: Optional table title
    """
    data = _plain(data)
    if pretty:
        _emit_table(data, title)
    else:
        print(json.dumps(data, ensure_ascii=False), flush=True)


def _emit_table(data: Any, title: Optional[str] = None) -> None:
    """Emit a result as a Rich table."""
    console = Console()

    if isinstance(data, dict):
        # {"version": ..., "metadata": [...]} from `in`
        if isinstance(data.get('metadata'), list):
            rows = [{'name': 'version', 'value': data.get('version', {}).get('ref', '')}]
            rows.extend(data['metadata'])
        else:
            rows = [{'name': k, 'value': v} for k, v in data.items()]
    else:
        rows = list(data)

    if not rows:
        console.print("No new versions")
        return

    columns = _columns(rows)
    table = Table(show_header=True, header_style="bold", title=title)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[_format_value(row.get(col, '')) for col in columns])
    console.print(table)


def _columns(rows: List[Dict]) -> List[str]:
    preferred = ['ref', 'name', 'value']
    keys = set()
    for row in rows:
        keys.update(row.keys())
    columns = [col for col in preferred if col in keys]
    columns.extend(sorted(keys - set(columns)))
    return columns


def _format_value(value: Any, max_len: int = 72) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, (list, dict)):
        value = json.dumps(value, ensure_ascii=False)
    s = str(value).replace('\n', ' ')
    if len(s) > max_len:
        return s[:max_len-3] + '...'
    return s


def emit_error(
    error: str,
    type: str = "error",
    exit_code: Optional[int] = None,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (usually the exception class name)
        exit_code: Exit code the process is about to use
        context: Additional context dict
    """
    obj: Dict[str, Any] = {
        'error': error,
        'type': type
    }
    if exit_code is not None:
        obj['exit_code'] = exit_code
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)
