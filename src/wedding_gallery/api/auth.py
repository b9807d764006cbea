"""Shared-secret API key check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from wedding_gallery.errors import UnauthorizedError

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer


def _get_api_key(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_key


async def require_api_key(
    x_api_key: str | None = Header(default=None),
    api_key: str = Depends(_get_api_key),
) -> None:
    """Ensure requests carry the configured ``x-api-key`` header."""
    if not x_api_key or x_api_key != api_key:
        raise UnauthorizedError("Unauthorized")
