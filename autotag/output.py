"""
Output module for autotag.

Publishes the run's outputs where the caller can read them:
- GITHUB_OUTPUT file (inside GitHub Actions)
- JSONL (default): one JSON object on stdout for piping
- Pretty: a Rich table

Usage:
    from autotag.output import emit_result

    emit_result(result, output_file=config.output_file, pretty=False)
"""

import json
import sys
import uuid
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .domain.result import PublishResult


def format_github_output(outputs: Dict[str, str]) -> str:
    """
    Format outputs for the GITHUB_OUTPUT file.

    Every value uses the ``name<<DELIMITER`` form, so multi-line tag
    messages survive intact.
    """
    lines = []
    for name, value in outputs.items():
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        while delimiter in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
        lines.append(f"{name}<<{delimiter}")
        lines.append(value)
        lines.append(delimiter)
    return "\n".join(lines) + "\n"


def write_github_output(outputs: Dict[str, str], output_file: str) -> None:
    """Append outputs to the GITHUB_OUTPUT file."""
    with open(Path(output_file), 'a', encoding='utf-8') as f:
        f.write(format_github_output(outputs))


def _emit_table(result: PublishResult, console: Optional[Console] = None) -> None:
    """Emit a result as a Rich table."""
    console = console or Console()
    table = Table(show_header=True, header_style="bold")
    table.add_column("output")
    table.add_column("value")

    for name, value in result.outputs().items():
        table.add_row(name, escape(value))

    console.print(table)
    if result.error:
        console.print(f"[red]{result.error_type}: {escape(result.error)}[/red]")


def emit_result(
    result: PublishResult,
    output_file: str = '',
    pretty: bool = False,
    stream=None
) -> None:
    """
    Emit a publish result.

    Args:
        result: Result to publish
        output_file: GITHUB_OUTPUT path; written when set
        pretty: Render a table instead of JSONL
        stream: JSONL destination (defaults to stdout)
    """
    if output_file:
        write_github_output(result.outputs(), output_file)

    if pretty:
        _emit_table(result)
    else:
        stream = stream or sys.stdout
        print(json.dumps(result.to_dict(), ensure_ascii=False), file=stream, flush=True)
