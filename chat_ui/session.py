"""
Chat Session

Display-side state of one chat window: an append-only list of turns and
the call to the orchestrator's HTTP entry point.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from chat_ui.formatting import reflow_numbered_records
from orchestration.errors import ConfigurationError


logger = logging.getLogger(__name__)

GREETING = (
    "Dobrý deň. Moje meno je Zidan Sufurki a som váš asistent. Mojou úlohou je "
    "pomôcť Vám pri hľadaní lekára vo vašom okolí. Na začiatok mi, prosím, "
    "napíšte, akého lekára hľadáte a kde sa nachádzate."
)

UNAVAILABLE_MESSAGE = "Sorry, the assistant is not reachable right now. Please try again."


@dataclass(frozen=True)
class DisplayTurn:
    """
    One entry in the chat window.

    `text` is what gets rendered; `raw` is what the server returned and
    what is echoed back as conversation history.
    """
    sender: str  # "user" or "bot"
    text: str
    raw: str = ""
    in_history: bool = True
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.sender == "user"


class ChatSession:
    """
    Append-only chat transcript bound to one orchestrator endpoint.
    """

    def __init__(
        self,
        api_url: str,
        greeting: Optional[str] = GREETING,
        send_history: bool = True,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            api_url: Full URL of the orchestrator's chatbot endpoint
            greeting: First bot message; not sent to the server
            send_history: Whether earlier turns are sent as `conversation`
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use a mock transport)
        """
        self._api_url = api_url
        self._send_history = send_history
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._turns: List[DisplayTurn] = []
        if greeting:
            self._turns.append(DisplayTurn(sender="bot", text=greeting, raw=greeting, in_history=False))

    @property
    def turns(self) -> List[DisplayTurn]:
        return list(self._turns)

    def _conversation(self) -> List[Dict[str, str]]:
        return [
            {"role": "user" if turn.is_user else "assistant", "content": turn.raw}
            for turn in self._turns
            if turn.in_history
        ]

    def _request(self, text: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": text}
        if self._send_history:
            history = self._conversation()
            if history:
                payload["conversation"] = history
        return payload

    def submit(self, text: str) -> Optional[DisplayTurn]:
        """
        Send a user message and record both turns.

        A turn pair only joins the history when the server actually answered.
        Failed requests and the soft credentials error are shown but never replayed.

        Returns:
            The bot turn, or None when the input was blank
        """
        text = (text or "").strip()
        if not text:
            return None

        payload = self._request(text)

        try:
            response = self._client.post(self._api_url, json=payload)
            reply = str(response.json().get("message") or "")
            ok = response.status_code == 200 and reply != ConfigurationError.public_message
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning(f"Chat request failed: {e}")
            reply, ok = UNAVAILABLE_MESSAGE, False

        self._turns.append(DisplayTurn(sender="user", text=text, raw=text, in_history=ok))
        bot_turn = DisplayTurn(
            sender="bot",
            text=reflow_numbered_records(reply),
            raw=reply,
            in_history=ok,
        )
        self._turns.append(bot_turn)
        return bot_turn

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ChatSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
