"""Command line entrypoint for the gallery server and kiosk tools."""

import argparse
import asyncio
import sys
from pathlib import Path

import uvicorn

from wedding_gallery.adapters.analytics_client import HttpxAnalyticsClient
from wedding_gallery.adapters.kiosk import (
    BrowserLinkLauncher,
    ConsoleChannelPicker,
    ConsoleNotifier,
    DirectoryDownloader,
)
from wedding_gallery.adapters.pillow_renderer import PillowRenderer
from wedding_gallery.app_logging import configure_logging
from wedding_gallery.domain.compositing import PRESETS, ImageSource, Preset
from wedding_gallery.domain.frames import FrameId
from wedding_gallery.domain.sharing import ShareOutcome, ShareRequest, ShareTarget
from wedding_gallery.errors import GalleryError
from wedding_gallery.services.cache import LruCache
from wedding_gallery.services.compositor import Compositor
from wedding_gallery.services.frames import FrameCatalog
from wedding_gallery.services.sharing import ShareDispatcher, build_share_chain


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wedding-gallery",
        description="Wedding photo gallery server and photo booth tools.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--frames-dir",
        type=Path,
        default=Path("var/frames"),
        help="Directory holding the frame PNGs",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(handler=_serve)

    frames = commands.add_parser("frames", help="List available frames")
    frames.set_defaults(handler=_list_frames)

    frame = commands.add_parser("frame", help="Composite a photo under a frame")
    frame.add_argument("photo", type=Path, help="Photo to frame")
    frame.add_argument(
        "--frame", default=FrameId.STANDARD.value, choices=[f.value for f in FrameId]
    )
    frame.add_argument(
        "--preset", default=Preset.DOWNLOAD.value, choices=[p.value for p in Preset]
    )
    frame.add_argument("--output", type=Path, required=True, help="JPEG to write")
    frame.set_defaults(handler=_frame_photo)

    share = commands.add_parser("share", help="Share an image from the kiosk")
    share.add_argument("image", type=Path, help="Composited image to share")
    share.add_argument(
        "--target",
        default=ShareTarget.WHATSAPP.value,
        choices=[t.value for t in ShareTarget],
    )
    share.add_argument("--message", default="")
    share.add_argument("--photo-id", default=None, help="Defaults to the file name")
    share.add_argument("--frame", default=None, help="Frame id, for analytics")
    share.add_argument("--page-url", default=None, help="Public link to the photo")
    share.add_argument(
        "--downloads-dir",
        type=Path,
        default=Path("var/downloads"),
        help="Where downloaded copies are saved",
    )
    share.add_argument(
        "--analytics-url",
        default=None,
        help="Gallery server base URL to report shares to",
    )
    share.set_defaults(handler=_share_image)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface."""
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except GalleryError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


def _serve(args: argparse.Namespace) -> int:
    uvicorn.run(
        "wedding_gallery.api.asgi:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def _list_frames(args: argparse.Namespace) -> int:
    catalog = FrameCatalog(args.frames_dir)
    for frame in catalog.list_frames():
        asset = catalog.asset_path(frame)
        if asset is None:
            status = "no overlay"
        elif asset.is_file():
            status = str(asset)
        else:
            status = f"{asset} (missing)"
        print(f"{frame.id.value:<10} {frame.name:<14} {status}")
    return 0


def _frame_photo(args: argparse.Namespace) -> int:
    catalog = FrameCatalog(args.frames_dir)
    compositor = Compositor(
        renderer=PillowRenderer(), catalog=catalog, cache=LruCache()
    )
    result = asyncio.run(
        compositor.composite_or_fallback(
            ImageSource.from_path(args.photo),
            catalog.get_frame(args.frame),
            PRESETS[Preset(args.preset)],
        )
    )
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(result.data)
    note = ""
    if result.fallback_reason:
        note = f" (frame skipped: {result.fallback_reason})"
    print(f"Wrote {args.output} {result.width}x{result.height}{note}")
    return 0


def _share_image(args: argparse.Namespace) -> int:
    try:
        image = args.image.read_bytes()
    except OSError as exc:
        print(f"error: cannot read {args.image}: {exc}", file=sys.stderr)
        return 1
    request = ShareRequest(
        photo_id=args.photo_id or args.image.name,
        image=image,
        target=ShareTarget(args.target),
        message=args.message,
        frame_id=args.frame,
        page_url=args.page_url,
    )
    outcome = asyncio.run(_dispatch_share(request, args))
    if outcome.delivered:
        print(f"Shared via {outcome.channel}")
        return 0
    print(f"Share {outcome.status}")
    return 1


async def _dispatch_share(
    request: ShareRequest, args: argparse.Namespace
) -> ShareOutcome:
    tracker = (
        HttpxAnalyticsClient.create(args.analytics_url) if args.analytics_url else None
    )
    launcher = BrowserLinkLauncher()
    dispatcher = ShareDispatcher(
        strategies=build_share_chain(
            sheet=None,
            downloader=DirectoryDownloader(args.downloads_dir),
            launcher=launcher,
            notifier=ConsoleNotifier(),
            picker=ConsoleChannelPicker(),
        ),
        tracker=tracker,
    )
    try:
        return await dispatcher.share(request)
    finally:
        if tracker is not None:
            await tracker.close()


if __name__ == "__main__":
    sys.exit(main())
