"""Terminal and desktop notifications."""

import enum
import logging
import shutil
import subprocess
import sys

from colorama import Fore, Style

logger = logging.getLogger(__name__)


class NotificationMethod(enum.Enum):
    TERMINAL = "terminal"
    SYSTEM = "system"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str | None) -> "NotificationMethod":
        """
        Look up a method by name, case-insensitively.

        Unknown or empty names fall back to TERMINAL with a warning.

        >>> NotificationMethod.parse("Both")
        <NotificationMethod.BOTH: 'both'>

        """
        try:
            return cls((value or "terminal").strip().lower())
        except ValueError:
            logger.warning("Unknown notification method %r, using terminal", value)
            return cls.TERMINAL

    @property
    def uses_terminal(self) -> bool:
        return self in (NotificationMethod.TERMINAL, NotificationMethod.BOTH)

    @property
    def uses_system(self) -> bool:
        return self in (NotificationMethod.SYSTEM, NotificationMethod.BOTH)


def system_notifier() -> list[str] | None:
    """
    Command prefix for the platform's desktop notifier.

    Returns:
        ["notify-send"] or ["osascript", "-e"] when available, otherwise None.

    Example:
        if system_notifier():
            send_system_notification("Title", "Message")
    """
    if shutil.which("notify-send"):
        return ["notify-send"]
    if sys.platform == "darwin" and shutil.which("osascript"):
        return ["osascript", "-e"]
    return None


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def send_system_notification(title: str, message: str) -> bool:
    """
    Show a desktop notification.

    Args:
        title: Notification title.
        message: Notification body.

    Returns:
        True if a notifier ran successfully, False if none is available
        or it failed.

    Example:
        send_system_notification("git-sync-check", "2 repositories need attention")
    """
    notifier = system_notifier()
    if notifier is None:
        logger.warning("No desktop notifier found (notify-send or osascript)")
        return False

    if notifier[0] == "osascript":
        script = f"display notification {_applescript_quote(message)} with title {_applescript_quote(title)}"
        cmd = [*notifier, script]
    else:
        cmd = [*notifier, title, message]

    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        logger.warning("%s failed: %s", notifier[0], result.stderr.strip())
        return False
    return True


def print_terminal_notification(title: str, message: str) -> None:
    """Print a highlighted notice to stdout."""
    print(f"{Style.BRIGHT}{Fore.YELLOW}[{title}]{Style.RESET_ALL} {message}")


def notify(
    title: str,
    message: str,
    method: NotificationMethod = NotificationMethod.TERMINAL,
) -> None:
    """
    Deliver a notification using the given method.

    A missing or failing desktop notifier is logged, never raised.

    Example:
        notify("git-sync-check", "1 repository needs pull", NotificationMethod.BOTH)
    """
    if method.uses_terminal:
        print_terminal_notification(title, message)
    if method.uses_system:
        send_system_notification(title, message)
