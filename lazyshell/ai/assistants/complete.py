from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console

from ..llm import LLMClient
from .system import get_os_prompt_injection


SYSTEM_PROMPT = (
    "You are a zsh autocomplete script. All your answers are a single command{os}, "
    "and nothing else. You do not need to wrap the command in backticks. "
    "You do not write any human-readable explanations. "
    "If you cannot provide a response, start your response with `#`."
)


@dataclass(frozen=True)
class EditorState:
    """The command line being edited and the cursor offset within it."""

    buffer: str
    cursor: int


class QueryAborted(Exception):
    pass


def read_query(reader: Optional[Callable[[str], str]] = None) -> str:
    """Asks for the query on stderr, stdout only ever carries the result."""
    if reader is None:
        reader = Console(stderr=True).input
    try:
        return reader("> Query: ")
    except (KeyboardInterrupt, EOFError):
        raise QueryAborted() from None


def build_prompt(buffer: str, query: str) -> str:
    if not buffer:
        return query
    return f"Alter zsh command `{buffer}` to comply with query `{query}`"


def complete(config, state: EditorState, query: str, client: Optional[LLMClient] = None) -> Optional[EditorState]:
    """
    Turns `query` into a command, rewriting the current buffer if there is one.

    Returns the new editor state, or None when the buffer must stay as it was.
    Errors from the request propagate.
    """
    client = client or LLMClient(config)
    intro = SYSTEM_PROMPT.format(os=get_os_prompt_injection())

    generated_text = client.request(intro, build_prompt(state.buffer, query), f"Query: {query}")

    # The model starts its answer with '#' when it could not produce a command
    if generated_text.startswith("#"):
        client.status.message(generated_text)
        return None

    return EditorState(buffer=generated_text, cursor=len(generated_text))
