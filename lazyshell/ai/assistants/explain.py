from typing import Optional

from ..llm import LLMClient
from .complete import EditorState
from .system import get_os_prompt_injection


SYSTEM_PROMPT = (
    "You are a zsh command explanation assistant{os}. "
    "You write short and concise explanations what a given zsh command does, "
    "including the arguments. You answer with no line breaks."
)


def explain(config, state: EditorState, client: Optional[LLMClient] = None) -> str:
    """Explains the command in the buffer. The answer is returned as a shell comment."""
    client = client or LLMClient(config)
    intro = SYSTEM_PROMPT.format(os=get_os_prompt_injection())

    generated_text = client.request(intro, state.buffer, "Fetching Explanation...")
    return f"# {generated_text}"
