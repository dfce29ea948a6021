"""
CLI utility helpers - output formatting.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_result(data: Any, *, as_json: bool = False, title: str = "") -> None:
    """Render a result object to the terminal."""
    payload = _to_dict(data)

    if as_json:
        console.print_json(json.dumps(payload, default=str))
        return

    _print_dict(payload, title=title)


def _print_dict(data: dict[str, Any], *, title: str = "", indent: int = 2) -> None:
    """Render a dict as key-value pairs, nesting sub-dicts."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    pad = " " * indent
    for k, v in data.items():
        if isinstance(v, dict):
            console.print(f"{pad}[cyan]{k}[/cyan]:")
            _print_dict(v, indent=indent + 2)
        else:
            console.print(f"{pad}[cyan]{k}[/cyan]: {v}")
