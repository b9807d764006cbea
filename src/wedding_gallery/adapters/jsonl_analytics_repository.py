"""Append-only JSON Lines files for analytics events."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from wedding_gallery.domain.analytics import FrameUsedEventIn, ShareEventIn
from wedding_gallery.services.analytics import AnalyticsRepository

_logger = logging.getLogger(__name__)

_Event = TypeVar("_Event", bound=BaseModel)


@dataclass
class JsonlAnalyticsRepository(AnalyticsRepository):
    """Stores events under ``data_dir`` when Supabase is not configured."""

    data_dir: Path

    def add_share_event(self, event: ShareEventIn) -> None:
        self._append(self._share_path, event)

    def add_frame_event(self, event: FrameUsedEventIn) -> None:
        self._append(self._frame_path, event)

    def list_share_events(self, limit: int | None = None) -> list[ShareEventIn]:
        return _read(self._share_path, ShareEventIn, limit)

    def list_frame_events(self, limit: int | None = None) -> list[FrameUsedEventIn]:
        return _read(self._frame_path, FrameUsedEventIn, limit)

    @property
    def _share_path(self) -> Path:
        return self.data_dir / "share_events.jsonl"

    @property
    def _frame_path(self) -> Path:
        return self.data_dir / "frame_events.jsonl"

    def _append(self, path: Path, event: BaseModel) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(event.model_dump_json(by_alias=True) + "\n")


def _read(path: Path, model: type[_Event], limit: int | None) -> list[_Event]:
    if not path.is_file():
        return []
    events: list[_Event] = []
    with path.open(encoding="utf-8") as handle:
        for line in handle:
            if not line.strip():
                continue
            try:
                events.append(model.model_validate_json(line))
            except ValidationError:
                _logger.warning("Skipping malformed analytics line in %s", path.name)
    events.reverse()
    return events if limit is None else events[:limit]
