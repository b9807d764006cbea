"""Sharing dispatcher: an ordered chain of delivery strategies.

Each strategy answers SUCCESS, FALLBACK or FATAL. The dispatcher tries them
in order, stops at the first SUCCESS or FATAL, and records a share event for
every path it engaged. Recording is optimistic; there is no way to learn
whether the guest finished the external step.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from wedding_gallery.domain.sharing import (
    HANDOFF_CHANNELS,
    ShareChannel,
    ShareEvent,
    ShareOutcome,
    SharePayload,
    ShareRequest,
    ShareTarget,
    StrategyResult,
    Verdict,
)
from wedding_gallery.services.share_links import handoff_url

_logger = logging.getLogger(__name__)


class NativeShareSheet(Protocol):
    """Platform share sheet able to attach files."""

    def can_share(self, payload: SharePayload) -> bool:
        """Return true when the sheet accepts this payload, files included."""

    async def share(self, payload: SharePayload) -> None:
        """Open the sheet; raise if the guest cancels or the platform refuses."""


class Downloader(Protocol):
    """Saves the image where the guest can pick it up."""

    async def download(self, filename: str, data: bytes, media_type: str) -> str:
        """Save the file and return where it went."""


class LinkLauncher(Protocol):
    """Opens deep links, web intents and mailto drafts."""

    async def open(self, url: str) -> None:
        """Open a URL in the appropriate app."""


class Notifier(Protocol):
    """Shows a blocking notice to the guest."""

    async def notify(self, message: str) -> None:
        """Display the message and wait for acknowledgement."""


@dataclass(frozen=True)
class PickerOption:
    """One entry of the manual channel picker."""

    target: ShareTarget
    channel: ShareChannel
    label: str
    url: str


class ChannelPicker(Protocol):
    """Manual share sheet listing every channel."""

    async def choose(self, options: list[PickerOption]) -> PickerOption | None:
        """Return the chosen option, or None when dismissed."""


class ShareTracker(Protocol):
    """Fire-and-forget sink for share events."""

    async def record_share(self, event: ShareEvent) -> None:
        """Record that a share was attempted."""


class ShareStrategy(Protocol):
    """One link of the fallback chain."""

    name: str

    async def attempt(self, request: ShareRequest) -> StrategyResult:
        """Try to deliver and report a verdict."""


@dataclass(frozen=True)
class ShareCopy:
    """Guest-facing wording used across strategies."""

    title: str = "Our wedding photo"
    default_message: str = "Have a look at this photo from our wedding!"
    email_subject: str = "A photo from our wedding"
    filename_prefix: str = "wedding"

    def message_for(self, request: ShareRequest) -> str:
        return request.message or self.default_message

    def filename_for(self, request: ShareRequest) -> str:
        return f"{self.filename_prefix}-{request.frame_id or 'photo'}.jpg"

    def download_notice(self, target: ShareTarget) -> str:
        if target is ShareTarget.EMAIL:
            return (
                "The photo was downloaded. "
                "Attach it to the email draft that just opened."
            )
        return (
            "The photo was downloaded. "
            f"Open {target.value.capitalize()} and pick it from your gallery."
        )


PICKER_LABELS: dict[ShareTarget, str] = {
    ShareTarget.WHATSAPP: "WhatsApp",
    ShareTarget.FACEBOOK: "Facebook",
    ShareTarget.INSTAGRAM: "Instagram",
    ShareTarget.EMAIL: "Email",
}


@dataclass
class NativeFileShareStrategy:
    """Share the image file through the platform share sheet."""

    sheet: NativeShareSheet | None
    copy: ShareCopy = field(default_factory=ShareCopy)
    name: str = "native-file"

    async def attempt(self, request: ShareRequest) -> StrategyResult:
        if self.sheet is None:
            return StrategyResult.fallback("native share unavailable")
        payload = SharePayload(
            title=self.copy.title,
            text=self.copy.message_for(request),
            filename=self.copy.filename_for(request),
            data=request.image,
        )
        if not self.sheet.can_share(payload):
            return StrategyResult.fallback("native share cannot take files")
        try:
            await self.sheet.share(payload)
        except Exception as exc:
            _logger.info("Native share rejected: %s", exc)
            return StrategyResult.fallback("native share rejected")
        return StrategyResult(
            verdict=Verdict.SUCCESS,
            channel=ShareChannel.NATIVE_FILE,
            shared_image=True,
        )


@dataclass
class DownloadHandoffStrategy:
    """Download the file, then open the channel's app prefilled with text."""

    downloader: Downloader
    launcher: LinkLauncher
    notifier: Notifier
    copy: ShareCopy = field(default_factory=ShareCopy)
    name: str = "download-handoff"

    async def attempt(self, request: ShareRequest) -> StrategyResult:
        channel = HANDOFF_CHANNELS.get(request.target)
        if channel is None:
            return StrategyResult.fallback(f"no handoff for {request.target}")
        try:
            location = await self.downloader.download(
                self.copy.filename_for(request), request.image, "image/jpeg"
            )
        except Exception:
            _logger.exception("Download for %s failed", request.photo_id)
            return StrategyResult.fallback("download failed")
        url = handoff_url(
            request.target,
            self.copy.message_for(request),
            self.copy.email_subject,
            request.page_url,
        )
        if url is not None:
            await _open_best_effort(self.launcher, url)
        await self.notifier.notify(self.copy.download_notice(request.target))
        return StrategyResult(
            verdict=Verdict.SUCCESS,
            channel=channel,
            shared_image=True,
            detail=location,
        )


@dataclass
class ManualPickerStrategy:
    """Last resort: let the guest pick a channel; each opens its own link."""

    picker: ChannelPicker
    launcher: LinkLauncher
    copy: ShareCopy = field(default_factory=ShareCopy)
    name: str = "manual-picker"

    async def attempt(self, request: ShareRequest) -> StrategyResult:
        options = self.options_for(request)
        choice = await self.picker.choose(options)
        if choice is None:
            return StrategyResult(verdict=Verdict.FATAL, detail="dismissed")
        await _open_best_effort(self.launcher, choice.url)
        return StrategyResult(verdict=Verdict.SUCCESS, channel=choice.channel)

    def options_for(self, request: ShareRequest) -> list[PickerOption]:
        message = self.copy.message_for(request)
        options = []
        for target, label in PICKER_LABELS.items():
            url = handoff_url(
                target, message, self.copy.email_subject, request.page_url
            )
            if url is None:
                continue
            options.append(
                PickerOption(
                    target=target,
                    channel=HANDOFF_CHANNELS[target],
                    label=label,
                    url=url,
                )
            )
        return options


@dataclass
class ShareDispatcher:
    """Runs the strategy chain for one share request."""

    strategies: list[ShareStrategy]
    tracker: ShareTracker | None = None

    async def share(self, request: ShareRequest) -> ShareOutcome:
        """Try each strategy in order until one succeeds or gives up."""
        attempts: list[str] = []
        for strategy in self.strategies:
            result = await strategy.attempt(request)
            attempts.append(f"{strategy.name}:{result.verdict.value}")
            if result.verdict is Verdict.SUCCESS:
                await self._track(request, result)
                return ShareOutcome(
                    status="shared",
                    channel=result.channel,
                    strategy=strategy.name,
                    attempts=attempts,
                )
            if result.verdict is Verdict.FATAL:
                return ShareOutcome(
                    status=result.detail or "failed",
                    channel=None,
                    strategy=strategy.name,
                    attempts=attempts,
                )
            _logger.info("Share via %s fell back: %s", strategy.name, result.detail)
        return ShareOutcome(
            status="failed", channel=None, strategy=None, attempts=attempts
        )

    async def _track(self, request: ShareRequest, result: StrategyResult) -> None:
        if self.tracker is None or result.channel is None:
            return
        event = ShareEvent(
            photo_id=request.photo_id,
            channel=result.channel.value,
            target=request.target.value,
            message=request.message,
            frame_id=request.frame_id,
            shared_image=result.shared_image,
        )
        try:
            await self.tracker.record_share(event)
        except Exception:
            _logger.warning("Share tracking failed for %s", request.photo_id)


def build_share_chain(  # noqa: PLR0913
    sheet: NativeShareSheet | None,
    downloader: Downloader,
    launcher: LinkLauncher,
    notifier: Notifier,
    picker: ChannelPicker,
    copy: ShareCopy | None = None,
) -> list[ShareStrategy]:
    """Return the default order: native file, download handoff, manual picker."""
    resolved = copy or ShareCopy()
    return [
        NativeFileShareStrategy(sheet=sheet, copy=resolved),
        DownloadHandoffStrategy(
            downloader=downloader,
            launcher=launcher,
            notifier=notifier,
            copy=resolved,
        ),
        ManualPickerStrategy(picker=picker, launcher=launcher, copy=resolved),
    ]


async def _open_best_effort(launcher: LinkLauncher, url: str) -> None:
    try:
        await launcher.open(url)
    except Exception:
        _logger.warning("Could not open %s", url.split("?", maxsplit=1)[0])
