"""The zsh side of lazyshell, printed by `lazyshell init` and loaded with `eval`."""

from .ai.providers import PROVIDERS, get_provider

ZSH_SCRIPT = r"""
# lazyshell: LLM powered command completion and explanation for zsh.
# Load it from ~/.zshrc with:  eval "$(lazyshell init)"

typeset -gx LZSH_LLM_PROVIDER=${LZSH_LLM_PROVIDER:-%(provider)s}
typeset -gA __lzsh_provider_labels=( %(labels)s )

# Read a query and replace the buffer with the generated command
__lazyshell_complete() {
  emulate -L zsh
  %(executable)s check 2>/dev/tty || { zle reset-prompt; return 1 }

  local buffer_context="$BUFFER"
  local cursor_position=$CURSOR

  local REPLY
  autoload -Uz read-from-minibuffer
  read-from-minibuffer '> Query: '
  local aborted=$?
  BUFFER="$buffer_context"
  CURSOR=$cursor_position
  if (( aborted )); then
    return 1
  fi

  local generated_text
  generated_text=$(%(executable)s complete --buffer="$buffer_context" --cursor=$cursor_position --query="$REPLY" 2>/dev/tty)
  if [ $? -ne 0 ]; then
    zle reset-prompt
    return 1
  fi

  BUFFER="$generated_text"
  CURSOR=$#BUFFER
}

# Explain the command in the buffer
__lazyshell_explain() {
  emulate -L zsh
  %(executable)s check 2>/dev/tty || { zle reset-prompt; return 1 }

  local explanation
  explanation=$(%(executable)s explain --buffer="$BUFFER" 2>/dev/tty)
  if [ $? -ne 0 ]; then
    zle reset-prompt
    return 1
  fi

  zle -R "$explanation"
  read -k 1
}

# Switch between the supported LLM providers for this session
__lazyshell_toggle_provider() {
  emulate -L zsh

  local provider
  provider=$(%(executable)s toggle 2>/dev/null) || return 1
  LZSH_LLM_PROVIDER="$provider"
  zle -M "Switched to ${__lzsh_provider_labels[$provider]} API"
}

zle -N __lazyshell_complete
zle -N __lazyshell_explain
zle -N __lazyshell_toggle_provider
bindkey '^G' __lazyshell_complete
bindkey '^E' __lazyshell_explain
bindkey '^T' __lazyshell_toggle_provider

typeset -ga ZSH_AUTOSUGGEST_CLEAR_WIDGETS
ZSH_AUTOSUGGEST_CLEAR_WIDGETS+=( __lazyshell_explain )
"""


def render_zsh_script(provider: str, executable: str = "lazyshell") -> str:
    labels = " ".join(f"{name} {get_provider(name).config.label}" for name in PROVIDERS)
    return ZSH_SCRIPT.lstrip("\n") % {
        "provider": provider,
        "executable": executable,
        "labels": labels,
    }
