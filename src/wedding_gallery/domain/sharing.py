"""Domain models for the photo sharing flow."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

MAX_MESSAGE_LENGTH = 100


class ShareTarget(StrEnum):
    """Where the guest asked to send the photo."""

    NATIVE = "native"
    WHATSAPP = "whatsapp"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    EMAIL = "email"


class ShareChannel(StrEnum):
    """Delivery path actually used; recorded as the analytics channel tag."""

    NATIVE_FILE = "native-file"
    MESSAGING_DEEPLINK = "messaging-deeplink"
    SOCIAL_WEB_INTENT = "social-web-intent"
    EMAIL_MAILTO = "email-mailto"


HANDOFF_CHANNELS: dict[ShareTarget, ShareChannel] = {
    ShareTarget.WHATSAPP: ShareChannel.MESSAGING_DEEPLINK,
    ShareTarget.FACEBOOK: ShareChannel.SOCIAL_WEB_INTENT,
    ShareTarget.INSTAGRAM: ShareChannel.SOCIAL_WEB_INTENT,
    ShareTarget.EMAIL: ShareChannel.EMAIL_MAILTO,
}


class Verdict(StrEnum):
    """What a sharing strategy tells the dispatcher."""

    SUCCESS = "success"
    FALLBACK = "fallback"
    FATAL = "fatal"


@dataclass(frozen=True)
class SharePayload:
    """A titled image file plus optional text handed to a share mechanism."""

    title: str
    text: str
    filename: str
    data: bytes
    media_type: str = "image/jpeg"


@dataclass(frozen=True)
class ShareRequest:
    """One guest-initiated share of a composited image."""

    photo_id: str
    image: bytes
    target: ShareTarget
    message: str = ""
    frame_id: str | None = None
    page_url: str | None = None


@dataclass(frozen=True)
class StrategyResult:
    """Verdict from one strategy, with the channel it engaged on success."""

    verdict: Verdict
    channel: ShareChannel | None = None
    shared_image: bool = False
    detail: str | None = None

    @classmethod
    def fallback(cls, detail: str) -> "StrategyResult":
        return cls(verdict=Verdict.FALLBACK, detail=detail)


@dataclass(frozen=True)
class ShareOutcome:
    """Final result of a share flow."""

    status: str
    channel: ShareChannel | None
    strategy: str | None
    attempts: list[str] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return self.status == "shared"


@dataclass(frozen=True)
class ShareEvent:
    """Analytics record of an attempted share. Delivery is never confirmed."""

    photo_id: str
    channel: str
    target: str
    message: str = ""
    frame_id: str | None = None
    shared_image: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def to_dict(self) -> dict[str, object]:
        return {
            "photoId": self.photo_id,
            "platform": self.channel,
            "target": self.target,
            "message": self.message[:MAX_MESSAGE_LENGTH],
            "frameId": self.frame_id,
            "sharedImage": self.shared_image,
            "timestamp": self.timestamp.isoformat(),
        }
