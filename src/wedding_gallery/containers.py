"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from wedding_gallery.adapters.canvas_renderer import CanvasPlanRenderer
from wedding_gallery.adapters.http_image_fetcher import HttpxImageFetcher
from wedding_gallery.adapters.json_metadata_repository import JsonMetadataRepository
from wedding_gallery.adapters.jsonl_analytics_repository import (
    JsonlAnalyticsRepository,
)
from wedding_gallery.adapters.local_storage import LocalPhotoStorage
from wedding_gallery.adapters.pillow_renderer import PillowRenderer
from wedding_gallery.adapters.supabase_analytics_repository import (
    SupabaseAnalyticsRepository,
)
from wedding_gallery.config import Settings, ensure_directories
from wedding_gallery.domain.compositing import CompositeOptions
from wedding_gallery.domain.geometry import Size
from wedding_gallery.services.analytics import AnalyticsRepository, AnalyticsService
from wedding_gallery.services.cache import LruCache
from wedding_gallery.services.compositor import Compositor
from wedding_gallery.services.frames import FrameCatalog
from wedding_gallery.services.gallery import GalleryService
from wedding_gallery.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: FrameCatalog
    compositor: Compositor
    canvas_renderer: CanvasPlanRenderer
    upload_service: UploadService
    gallery_service: GalleryService
    analytics_service: AnalyticsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    ensure_directories(resolved_settings)
    catalog = FrameCatalog(resolved_settings.frames_dir)
    renderer = PillowRenderer()
    fetcher = HttpxImageFetcher.create(resolved_settings.http_timeout_seconds)
    compositor = Compositor(
        renderer=renderer,
        catalog=catalog,
        fetcher=fetcher,
        cache=LruCache(resolved_settings.image_cache_capacity),
    )
    storage = LocalPhotoStorage(
        photos_dir=resolved_settings.photos_dir,
        thumbnails_dir=resolved_settings.thumbnails_dir,
    )
    metadata_repository = JsonMetadataRepository(resolved_settings.data_dir)
    upload_service = UploadService(
        storage=storage,
        metadata_repository=metadata_repository,
        compositor=compositor,
        thumbnailer=renderer,
        frame_filename=resolved_settings.server_frame_filename,
        frame_options=CompositeOptions(
            scale_factor=resolved_settings.server_frame_scale,
            quality=resolved_settings.server_frame_quality,
        ),
        thumbnail_size=Size(
            width=resolved_settings.thumbnail_width,
            height=resolved_settings.thumbnail_height,
        ),
        thumbnail_quality=resolved_settings.thumbnail_quality,
    )
    gallery_service = GalleryService(
        storage=storage,
        metadata_repository=metadata_repository,
        compositor=compositor,
        catalog=catalog,
    )
    analytics_service = AnalyticsService(_analytics_repository(resolved_settings))

    async def close_resources() -> None:
        await fetcher.close()
        compositor.clear_cache()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        compositor=compositor,
        canvas_renderer=CanvasPlanRenderer(),
        upload_service=upload_service,
        gallery_service=gallery_service,
        analytics_service=analytics_service,
        close_resources=close_resources,
    )


def _analytics_repository(settings: Settings) -> AnalyticsRepository:
    if settings.supabase_enabled:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseAnalyticsRepository(client)
    return JsonlAnalyticsRepository(settings.data_dir / "analytics")
