"""
Clipboard collaborators.

The workflow only needs `write(text) -> bool`. The web app and tests use
MemoryClipboard (the caller reads `contents`); the CLI pipes to the
platform's clipboard command when one is installed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import shlex
import shutil
import subprocess

from content_assistant.config import CLIPBOARD_COMMAND


# Tried in order when no command is configured
KNOWN_COMMANDS: Sequence[List[str]] = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


class Clipboard(ABC):
    """Destination for copied/exported text."""
    
    @property
    @abstractmethod
    def name(self) -> str:
        pass
    
    @abstractmethod
    def write(self, text: str) -> bool:
        """Copy text; return False if the copy failed."""
        pass


class MemoryClipboard(Clipboard):
    """Keeps the last written text in memory."""
    
    def __init__(self):
        self.contents: Optional[str] = None
        self.history: List[str] = []
    
    @property
    def name(self) -> str:
        return "memory"
    
    def write(self, text: str) -> bool:
        self.contents = text
        self.history.append(text)
        return True


class CommandClipboard(Clipboard):
    """Pipes text into a clipboard command such as pbcopy or xclip."""
    
    def __init__(self, command: Sequence[str], timeout: int = 5):
        self.command = list(command)
        self.timeout = timeout
    
    @property
    def name(self) -> str:
        return self.command[0]
    
    def write(self, text: str) -> bool:
        try:
            subprocess.run(
                self.command,
                input=text,
                text=True,
                check=True,
                timeout=self.timeout,
            )
            return True
        except (OSError, subprocess.SubprocessError) as e:
            print(f"[clipboard] Error copying with {self.name}: {e}")
            return False


def find_clipboard_command() -> Optional[List[str]]:
    """Return the configured or first installed clipboard command."""
    if CLIPBOARD_COMMAND:
        return shlex.split(CLIPBOARD_COMMAND)
    for command in KNOWN_COMMANDS:
        if shutil.which(command[0]):
            return list(command)
    return None


def create_clipboard() -> Clipboard:
    """System clipboard when available, otherwise in-memory."""
    command = find_clipboard_command()
    if command:
        return CommandClipboard(command)
    return MemoryClipboard()
