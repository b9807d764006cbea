"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from PIL import Image

from wedding_gallery.adapters.canvas_renderer import CanvasPlanRenderer
from wedding_gallery.adapters.pillow_renderer import PillowRenderer
from wedding_gallery.config import Settings
from wedding_gallery.containers import AppContainer
from wedding_gallery.domain.analytics import FrameUsedEventIn, ShareEventIn
from wedding_gallery.domain.sharing import ShareEvent, SharePayload
from wedding_gallery.services.analytics import AnalyticsRepository, AnalyticsService
from wedding_gallery.services.cache import LruCache
from wedding_gallery.services.compositor import Compositor
from wedding_gallery.services.frames import FrameCatalog
from wedding_gallery.services.gallery import GalleryService
from wedding_gallery.services.sharing import (
    ChannelPicker,
    Downloader,
    LinkLauncher,
    NativeShareSheet,
    Notifier,
    PickerOption,
    ShareTracker,
)
from wedding_gallery.services.uploads import (
    MetadataRepository,
    PhotoStorage,
    StoredFile,
    UploadService,
)

FRAME_SIZE = (400, 300)
FRAME_BORDER = (200, 0, 0, 255)
PHOTO_COLOR = (0, 0, 255)


def image_bytes(
    width: int,
    height: int,
    color: tuple[int, ...] = PHOTO_COLOR,
    fmt: str = "JPEG",
) -> bytes:
    """Encode a solid-color image."""
    mode = "RGBA" if len(color) == 4 else "RGB"
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


def frame_png(width: int = FRAME_SIZE[0], height: int = FRAME_SIZE[1]) -> bytes:
    """Opaque border with a fully transparent window covering the photo box."""
    frame = Image.new("RGBA", (width, height), FRAME_BORDER)
    margin_x, margin_y = width * 15 // 200, height * 15 // 200
    frame.paste((0, 0, 0, 0), (margin_x, margin_y, width - margin_x, height - margin_y))
    buffer = io.BytesIO()
    frame.save(buffer, format="PNG")
    return buffer.getvalue()


def decode(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def close_to(
    actual: tuple[int, ...], expected: tuple[int, ...], tolerance: int = 24
) -> bool:
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected, strict=False))


@dataclass
class InMemoryPhotoStorage(PhotoStorage):
    """In-memory photo storage for tests."""

    photos: dict[str, bytes] = field(default_factory=dict)
    thumbnails: dict[str, bytes] = field(default_factory=dict)
    modified: dict[str, int] = field(default_factory=dict)
    clock: int = 1_700_000_000_000

    def save_photo(self, filename: str, data: bytes) -> None:
        self.clock += 1
        self.photos[filename] = data
        self.modified[filename] = self.clock

    def read_photo(self, filename: str) -> bytes | None:
        return self.photos.get(filename)

    def photo_exists(self, filename: str) -> bool:
        return filename in self.photos

    def list_photos(self) -> list[StoredFile]:
        return [
            StoredFile(filename=name, modified_at=self.modified[name])
            for name in sorted(self.photos)
        ]

    def save_thumbnail(self, filename: str, data: bytes) -> None:
        self.thumbnails[filename] = data


@dataclass
class InMemoryMetadataRepository(MetadataRepository):
    """In-memory metadata sidecars for tests."""

    records: dict[str, dict[str, object]] = field(default_factory=dict)

    def save(self, photo_id: str, metadata: dict[str, object]) -> None:
        self.records[photo_id] = metadata

    def get(self, photo_id: str) -> dict[str, object] | None:
        return self.records.get(photo_id)


@dataclass
class InMemoryAnalyticsRepository(AnalyticsRepository):
    """In-memory analytics repository for tests."""

    shares: list[ShareEventIn] = field(default_factory=list)
    frames: list[FrameUsedEventIn] = field(default_factory=list)
    fail_writes: bool = False

    def add_share_event(self, event: ShareEventIn) -> None:
        if self.fail_writes:
            raise RuntimeError("analytics store offline")
        self.shares.append(event)

    def add_frame_event(self, event: FrameUsedEventIn) -> None:
        if self.fail_writes:
            raise RuntimeError("analytics store offline")
        self.frames.append(event)

    def list_share_events(self, limit: int | None = None) -> list[ShareEventIn]:
        events = list(reversed(self.shares))
        return events if limit is None else events[:limit]

    def list_frame_events(self, limit: int | None = None) -> list[FrameUsedEventIn]:
        events = list(reversed(self.frames))
        return events if limit is None else events[:limit]


@dataclass
class FakeShareSheet(NativeShareSheet):
    """Native share sheet that records payloads."""

    accepts_files: bool = True
    reject_with: Exception | None = None
    shared: list[SharePayload] = field(default_factory=list)

    def can_share(self, payload: SharePayload) -> bool:
        return self.accepts_files

    async def share(self, payload: SharePayload) -> None:
        if self.reject_with is not None:
            raise self.reject_with
        self.shared.append(payload)


@dataclass
class RecordingDownloader(Downloader):
    """Downloader that keeps files in memory."""

    files: dict[str, bytes] = field(default_factory=dict)
    fail: bool = False

    async def download(self, filename: str, data: bytes, media_type: str) -> str:
        if self.fail:
            raise OSError("disk full")
        self.files[filename] = data
        return f"/downloads/{filename}"


@dataclass
class RecordingLauncher(LinkLauncher):
    """Link launcher that records opened URLs."""

    opened: list[str] = field(default_factory=list)
    fail: bool = False

    async def open(self, url: str) -> None:
        if self.fail:
            raise RuntimeError("no browser")
        self.opened.append(url)


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that records notices."""

    notices: list[str] = field(default_factory=list)

    async def notify(self, message: str) -> None:
        self.notices.append(message)


@dataclass
class ScriptedPicker(ChannelPicker):
    """Picker that chooses a fixed label, or dismisses when none is set."""

    label: str | None = None
    offered: list[PickerOption] = field(default_factory=list)

    async def choose(self, options: list[PickerOption]) -> PickerOption | None:
        self.offered = options
        for option in options:
            if option.label == self.label:
                return option
        return None


@dataclass
class RecordingTracker(ShareTracker):
    """Share tracker that records events."""

    events: list[ShareEvent] = field(default_factory=list)
    fail: bool = False

    async def record_share(self, event: ShareEvent) -> None:
        if self.fail:
            raise RuntimeError("tracker offline")
        self.events.append(event)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_key="test-key",
        photos_dir=tmp_path / "photos",
        thumbnails_dir=tmp_path / "thumbnails",
        data_dir=tmp_path / "data",
        frames_dir=tmp_path / "frames",
        downloads_dir=tmp_path / "downloads",
        environment="test",
    )


@pytest.fixture
def frames_dir(settings: Settings) -> Path:
    """Frame assets for ``standard`` and ``custom``; ``insta`` stays missing."""
    directory = settings.frames_dir
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "wedding-frame-standard.png").write_bytes(frame_png())
    (directory / "wedding-frame-custom.png").write_bytes(frame_png(600, 450))
    return directory


@pytest.fixture
def catalog(frames_dir: Path) -> FrameCatalog:
    return FrameCatalog(frames_dir)


@pytest.fixture
def renderer() -> PillowRenderer:
    return PillowRenderer()


@pytest.fixture
def compositor(renderer: PillowRenderer, catalog: FrameCatalog) -> Compositor:
    return Compositor(renderer=renderer, catalog=catalog, cache=LruCache(4))


@pytest.fixture
def storage() -> InMemoryPhotoStorage:
    return InMemoryPhotoStorage()


@pytest.fixture
def metadata_repository() -> InMemoryMetadataRepository:
    return InMemoryMetadataRepository()


@pytest.fixture
def analytics_repository() -> InMemoryAnalyticsRepository:
    return InMemoryAnalyticsRepository()


@pytest.fixture
def upload_service(
    storage: InMemoryPhotoStorage,
    metadata_repository: InMemoryMetadataRepository,
    compositor: Compositor,
    renderer: PillowRenderer,
) -> UploadService:
    return UploadService(
        storage=storage,
        metadata_repository=metadata_repository,
        compositor=compositor,
        thumbnailer=renderer,
    )


@pytest.fixture
def gallery_service(
    storage: InMemoryPhotoStorage,
    metadata_repository: InMemoryMetadataRepository,
    compositor: Compositor,
    catalog: FrameCatalog,
) -> GalleryService:
    return GalleryService(
        storage=storage,
        metadata_repository=metadata_repository,
        compositor=compositor,
        catalog=catalog,
    )


@pytest.fixture
def container(
    settings: Settings,
    catalog: FrameCatalog,
    compositor: Compositor,
    upload_service: UploadService,
    gallery_service: GalleryService,
    analytics_repository: InMemoryAnalyticsRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog=catalog,
        compositor=compositor,
        canvas_renderer=CanvasPlanRenderer(),
        upload_service=upload_service,
        gallery_service=gallery_service,
        analytics_service=AnalyticsService(analytics_repository),
        close_resources=close_resources,
    )
