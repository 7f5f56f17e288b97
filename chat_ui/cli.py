"""
Terminal chat window for the specialist finder.

Run: specialist-chat [--url http://localhost:8000/api/chatbot]
"""

import argparse
from typing import List, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from app.core.config import settings
from chat_ui.formatting import has_markdown
from chat_ui.session import ChatSession, DisplayTurn

EXIT_COMMANDS = {"exit", "quit", "q"}

_theme = Theme(
    {
        "user": "bold blue",
        "bot": "bold green",
        "muted": "dim",
    }
)


def render_turn(console: Console, turn: DisplayTurn) -> None:
    if turn.is_user:
        console.print(Text(turn.text, style="user"), justify="right")
        return
    body = Markdown(turn.text) if has_markdown(turn.text) else Text(turn.text)
    console.print(Panel(body, title="bot", title_align="left", border_style="bot"))


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the specialist finder assistant.")
    parser.add_argument("--url", default=settings.chat_api_url, help="Chatbot endpoint URL")
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Send only the current message, without earlier turns",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    console = Console(theme=_theme)
    console.rule("Specialist finder")
    console.print("Type 'exit' to quit.", style="muted")

    with ChatSession(api_url=args.url, send_history=not args.no_history) as session:
        for turn in session.turns:
            render_turn(console, turn)

        while True:
            try:
                text = console.input("[user]you> [/user]").strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            if text.lower() in EXIT_COMMANDS:
                break
            if not text:
                continue
            with console.status("Thinking...", spinner="dots"):
                bot_turn = session.submit(text)
            if bot_turn is not None:
                render_turn(console, bot_turn)


if __name__ == "__main__":
    main()
