"""Terminal-side sharing adapters for the photo booth kiosk."""

import asyncio
import logging
import webbrowser
from dataclasses import dataclass
from pathlib import Path

from wedding_gallery.domain.photos import sanitize_filename
from wedding_gallery.errors import ShareChannelUnavailableError
from wedding_gallery.services.sharing import (
    ChannelPicker,
    Downloader,
    LinkLauncher,
    Notifier,
    PickerOption,
)

_logger = logging.getLogger(__name__)


@dataclass
class DirectoryDownloader(Downloader):
    """Saves shared images into a local downloads directory."""

    downloads_dir: Path

    async def download(self, filename: str, data: bytes, media_type: str) -> str:
        path = self.downloads_dir / sanitize_filename(filename)
        try:
            self.downloads_dir.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as exc:
            raise ShareChannelUnavailableError(f"Cannot save {path}") from exc
        _logger.info("Saved %s (%s, %d bytes)", path, media_type, len(data))
        return str(path)


@dataclass
class BrowserLinkLauncher(LinkLauncher):
    """Opens links with the system browser or mail client."""

    async def open(self, url: str) -> None:
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            raise ShareChannelUnavailableError("No browser available")


@dataclass
class ConsoleNotifier(Notifier):
    """Prints notices for the guest at the terminal."""

    async def notify(self, message: str) -> None:
        print(message)


@dataclass
class ConsoleChannelPicker(ChannelPicker):
    """Numbered channel menu read from standard input."""

    prompt: str = "Share to (number, empty to cancel): "

    async def choose(self, options: list[PickerOption]) -> PickerOption | None:
        for index, option in enumerate(options, start=1):
            print(f"{index}. {option.label}")
        try:
            answer = await asyncio.to_thread(input, self.prompt)
        except EOFError:
            return None
        answer = answer.strip()
        if not answer.isdigit() or not 1 <= int(answer) <= len(options):
            return None
        return options[int(answer) - 1]
