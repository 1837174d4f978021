"""Shared utilities for teamsflow CLI commands."""

import json

from rich.console import Console

console = Console()


def load_responses(path: str) -> list:
    """Read response messages from a JSON file.

    Accepts a bare list of response messages, a `queryResult` object, or a
    full detectIntent response (`{"queryResult": {...}}`).
    """
    from teamsflow.dialogflow import response_messages

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return response_messages(data.get("queryResult", data))
    raise ValueError(f"{path}: expected a JSON list or object, got {type(data).__name__}")
