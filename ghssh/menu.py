"""Interactive numbered menu — one prompt, one action, repeat until 0."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import typer

from .errors import GhsshError

Prompt = Callable[[str], str]
Echo = Callable[[str], None]

MENU_TITLE = "GitHub SSH Key Manager"
EXIT_KEY = "0"


@dataclass
class MenuItem:
    key: str
    label: str
    action: Callable[[Prompt], None]  # receives the prompt so it can ask follow-ups


def default_prompt(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


def render_menu(items: Sequence[MenuItem]) -> str:
    bar = "=" * 16
    lines = ["", f"{bar} {MENU_TITLE} {bar}"]
    lines += [f"{item.key}) {item.label}" for item in items]
    lines.append(f"{EXIT_KEY}) Exit")
    lines.append("=" * (len(MENU_TITLE) + 2 * len(bar) + 2))
    return "\n".join(lines)


def run_menu(items: Sequence[MenuItem], prompt: Prompt = default_prompt, echo: Echo = typer.echo) -> None:
    """
    Loop until the user picks 0 or input ends.

    Errors from an action are shown and the menu continues; they never end the
    session.
    """
    by_key = {item.key: item for item in items}
    while True:
        echo(render_menu(items))
        try:
            choice = prompt("Choose an option").strip()
        except (EOFError, typer.Abort):
            echo("Exiting...")
            return
        if choice == EXIT_KEY:
            echo("Exiting...")
            return
        item = by_key.get(choice)
        if item is None:
            echo("Invalid option.")
            continue
        try:
            item.action(prompt)
        except GhsshError as e:
            echo(typer.style(f"Error: {e}", fg="red"))
        except (EOFError, typer.Abort):
            echo("Exiting...")
            return
