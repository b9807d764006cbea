"""Tests for the sharing dispatcher and its strategies."""

import asyncio

from tests.conftest import (
    FakeShareSheet,
    RecordingDownloader,
    RecordingLauncher,
    RecordingNotifier,
    RecordingTracker,
    ScriptedPicker,
)
from wedding_gallery.domain.sharing import (
    ShareChannel,
    ShareEvent,
    ShareRequest,
    ShareTarget,
)
from wedding_gallery.services.sharing import ShareDispatcher, build_share_chain


def _dispatcher(
    sheet: FakeShareSheet | None = None,
    downloader: RecordingDownloader | None = None,
    launcher: RecordingLauncher | None = None,
    notifier: RecordingNotifier | None = None,
    picker: ScriptedPicker | None = None,
    tracker: RecordingTracker | None = None,
) -> ShareDispatcher:
    return ShareDispatcher(
        strategies=build_share_chain(
            sheet=sheet,
            downloader=downloader or RecordingDownloader(),
            launcher=launcher or RecordingLauncher(),
            notifier=notifier or RecordingNotifier(),
            picker=picker or ScriptedPicker(),
        ),
        tracker=tracker,
    )


def _request(target: ShareTarget = ShareTarget.WHATSAPP, **kwargs) -> ShareRequest:
    return ShareRequest(
        photo_id="original_1.jpg",
        image=b"jpeg-bytes",
        target=target,
        message=kwargs.pop("message", "Congrats!"),
        frame_id=kwargs.pop("frame_id", "standard"),
        **kwargs,
    )


def test_native_share_with_files_is_used_first() -> None:
    sheet = FakeShareSheet()
    tracker = RecordingTracker()
    downloader = RecordingDownloader()

    outcome = asyncio.run(
        _dispatcher(sheet=sheet, downloader=downloader, tracker=tracker).share(
            _request()
        )
    )

    assert outcome.delivered
    assert outcome.channel is ShareChannel.NATIVE_FILE
    assert sheet.shared[0].filename == "wedding-standard.jpg"
    assert sheet.shared[0].data == b"jpeg-bytes"
    assert downloader.files == {}
    assert tracker.events[0].channel == "native-file"
    assert tracker.events[0].shared_image is True


def test_missing_file_support_falls_back_to_download_handoff() -> None:
    sheet = FakeShareSheet(accepts_files=False)
    downloader = RecordingDownloader()
    launcher = RecordingLauncher()
    notifier = RecordingNotifier()
    tracker = RecordingTracker()

    outcome = asyncio.run(
        _dispatcher(
            sheet=sheet,
            downloader=downloader,
            launcher=launcher,
            notifier=notifier,
            tracker=tracker,
        ).share(_request())
    )

    assert outcome.delivered
    assert outcome.channel is ShareChannel.MESSAGING_DEEPLINK
    assert outcome.attempts == ["native-file:fallback", "download-handoff:success"]
    assert downloader.files == {"wedding-standard.jpg": b"jpeg-bytes"}
    assert launcher.opened[0].startswith("https://wa.me/?text=Congrats!")
    assert len(notifier.notices) == 1
    assert tracker.events[0].channel == "messaging-deeplink"


def test_native_rejection_falls_back_instead_of_doing_nothing() -> None:
    sheet = FakeShareSheet(reject_with=RuntimeError("AbortError"))
    downloader = RecordingDownloader()

    outcome = asyncio.run(
        _dispatcher(sheet=sheet, downloader=downloader).share(
            _request(ShareTarget.FACEBOOK, page_url="https://gallery.test/photo/1")
        )
    )

    assert outcome.channel is ShareChannel.SOCIAL_WEB_INTENT
    assert downloader.files


def test_email_handoff_opens_mail_draft() -> None:
    launcher = RecordingLauncher()

    outcome = asyncio.run(
        _dispatcher(launcher=launcher).share(_request(ShareTarget.EMAIL))
    )

    assert outcome.channel is ShareChannel.EMAIL_MAILTO
    assert launcher.opened[0].startswith("mailto:?subject=")


def test_launch_failure_still_counts_download_as_shared() -> None:
    launcher = RecordingLauncher(fail=True)
    notifier = RecordingNotifier()

    outcome = asyncio.run(
        _dispatcher(launcher=launcher, notifier=notifier).share(
            _request(ShareTarget.INSTAGRAM)
        )
    )

    assert outcome.delivered
    assert notifier.notices


def test_native_target_without_sheet_goes_to_picker() -> None:
    picker = ScriptedPicker(label="Email")
    launcher = RecordingLauncher()
    tracker = RecordingTracker()

    outcome = asyncio.run(
        _dispatcher(picker=picker, launcher=launcher, tracker=tracker).share(
            _request(ShareTarget.NATIVE)
        )
    )

    assert outcome.delivered
    assert outcome.strategy == "manual-picker"
    assert [option.label for option in picker.offered] == [
        "WhatsApp",
        "Facebook",
        "Instagram",
        "Email",
    ]
    assert launcher.opened[0].startswith("mailto:")
    assert tracker.events[0].shared_image is False


def test_failed_download_falls_back_to_picker() -> None:
    picker = ScriptedPicker(label="WhatsApp")

    outcome = asyncio.run(
        _dispatcher(downloader=RecordingDownloader(fail=True), picker=picker).share(
            _request()
        )
    )

    assert outcome.strategy == "manual-picker"
    assert outcome.channel is ShareChannel.MESSAGING_DEEPLINK


def test_dismissed_picker_records_nothing() -> None:
    tracker = RecordingTracker()

    outcome = asyncio.run(
        _dispatcher(tracker=tracker).share(_request(ShareTarget.NATIVE))
    )

    assert not outcome.delivered
    assert outcome.status == "dismissed"
    assert tracker.events == []


def test_tracker_failure_does_not_fail_share() -> None:
    outcome = asyncio.run(
        _dispatcher(
            sheet=FakeShareSheet(), tracker=RecordingTracker(fail=True)
        ).share(_request())
    )

    assert outcome.delivered


def test_empty_chain_reports_failure() -> None:
    outcome = asyncio.run(ShareDispatcher(strategies=[]).share(_request()))

    assert outcome.status == "failed"
    assert outcome.attempts == []


def test_share_event_truncates_message() -> None:
    event = ShareEvent(
        photo_id="p", channel="native-file", target="native", message="x" * 150
    )

    data = event.to_dict()

    assert len(data["message"]) == 100
    assert data["platform"] == "native-file"
