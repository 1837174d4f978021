"""Data model for the conversion pipeline.

Two sides:
- ResponseMessage: one Dialogflow response message, normalised from either
  the flat proto-JSON shape ({"message": "card", "card": {...}}) or the
  nested REST shape ({"card": {...}, "platform": "SLACK"}).
- ChannelMessage: one Teams-native reply, renderable as a Bot Framework
  activity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


HERO_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.hero"

# Platform values that mean "no restriction"
_UNTAGGED_PLATFORMS = {"", "PLATFORM_UNSPECIFIED"}

# Keys carrying routing metadata rather than a message body
_METADATA_KEYS = {
    "message", "platform", "platforms", "channel",
    "languageCode", "responseType", "source",
}


class ResponseKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    CARD = "card"
    QUICK_REPLIES = "quickReplies"
    PAYLOAD = "payload"


_KNOWN_KINDS = [k.value for k in ResponseKind]


def is_url_action(value: Optional[str]) -> bool:
    """True if a button value should open a URL rather than post back."""
    if not isinstance(value, str):
        return False
    return value.lower().startswith(("http://", "https://"))


@dataclass(frozen=True)
class Button:
    text: str
    value: str

    @property
    def is_url(self) -> bool:
        return is_url_action(self.value)

    @classmethod
    def from_dict(cls, data: Any) -> "Button":
        if not isinstance(data, Mapping):
            return cls(text="", value="")
        return cls(
            text=str(data.get("text") or ""),
            value=str(data.get("postback") or data.get("value") or ""),
        )


@dataclass(frozen=True)
class ResponseMessage:
    """One unit of conversational output for a single turn.

    `kind` is a ResponseKind value for kinds this channel understands, any
    other string for kinds it does not, or None when it could not be
    determined (malformed entry). `body` is the kind-specific payload.
    """
    kind: Optional[str]
    body: Any = None
    platforms: frozenset = frozenset()

    def is_for(self, platform: str) -> bool:
        """Untagged responses are eligible everywhere."""
        if not self.platforms:
            return True
        return platform.upper() in self.platforms

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResponseMessage":
        """Normalise a raw response message. Never raises on odd content."""
        kind = _detect_kind(data)
        body = data.get(kind) if kind else None
        return cls(kind=kind, body=body, platforms=_platform_tags(data))


def _detect_kind(data: Mapping[str, Any]) -> Optional[str]:
    # Flat shape: explicit discriminator
    discriminator = data.get("message")
    if isinstance(discriminator, str) and discriminator:
        return discriminator

    # Nested shape: first known kind key present wins
    for kind in _KNOWN_KINDS:
        if data.get(kind) is not None:
            return kind

    # Unknown kind for this channel (e.g. "video", "telephonyTransferCall")
    for key, value in data.items():
        if key not in _METADATA_KEYS and value is not None:
            return str(key)
    return None


def _platform_tags(data: Mapping[str, Any]) -> frozenset:
    tags = set()
    for key in ("platform", "channel"):
        value = data.get(key)
        if isinstance(value, str) and value.upper() not in _UNTAGGED_PLATFORMS:
            tags.add(value.upper())
    platforms = data.get("platforms")
    if isinstance(platforms, (list, tuple, set, frozenset)):
        tags.update(
            str(p).upper() for p in platforms
            if str(p).upper() not in _UNTAGGED_PLATFORMS
        )
    return frozenset(tags)


# ============================================================
# CHANNEL SIDE
# ============================================================

class ChannelMessageKind(str, Enum):
    MESSAGE = "message"
    ATTACHMENT = "attachment"
    SUGGESTED_ACTIONS = "suggestedActions"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class HeroCard:
    title: str = ""
    subtitle: Optional[str] = None
    image_url: Optional[str] = None
    buttons: tuple[Button, ...] = ()

    def to_attachment(self) -> dict:
        content: dict[str, Any] = {"title": self.title}
        if self.subtitle:
            content["subtitle"] = self.subtitle
        if self.image_url:
            content["images"] = [{"url": self.image_url}]
        if self.buttons:
            content["buttons"] = [
                {
                    "type": "openUrl" if b.is_url else "postBack",
                    "title": b.text,
                    "value": b.value,
                }
                for b in self.buttons
            ]
        return {"contentType": HERO_CARD_CONTENT_TYPE, "content": content}


@dataclass(frozen=True)
class ChannelMessage:
    """One Teams-native reply."""
    kind: ChannelMessageKind
    text: Optional[str] = None
    card: Optional[HeroCard] = None
    actions: tuple[str, ...] = ()
    payload: Optional[dict] = None

    def to_activity(self) -> dict:
        """Render as Bot Framework activity JSON."""
        if self.kind is ChannelMessageKind.PASSTHROUGH:
            return dict(self.payload or {})

        activity: dict[str, Any] = {"type": "message"}
        if self.kind is ChannelMessageKind.MESSAGE:
            activity["text"] = self.text or ""
        elif self.kind is ChannelMessageKind.ATTACHMENT:
            activity["attachments"] = [(self.card or HeroCard()).to_attachment()]
        elif self.kind is ChannelMessageKind.SUGGESTED_ACTIONS:
            if self.text is not None:
                activity["text"] = self.text
            activity["suggestedActions"] = {
                "actions": [
                    {"type": "imBack", "title": a, "value": a} for a in self.actions
                ],
            }
        return activity
