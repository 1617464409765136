import platform


def get_distribution_name() -> str:
    if platform.system() == "Darwin":
        version = platform.mac_ver()[0]
        return f"macOS {version}" if version else "macOS"

    try:
        return platform.freedesktop_os_release().get("PRETTY_NAME", "")
    except OSError:
        return ""


def get_os_prompt_injection() -> str:
    """A suffix naming the OS, appended to the system prompts (empty if unknown)."""
    os_name = get_distribution_name()
    return f" for {os_name}" if os_name else ""
