"""Map one Dialogflow response message to one Teams channel message.

Each supported kind has its own small mapper. Kinds without a mapper
(features meant for other channels) produce nothing. Missing fields never
raise; they degrade to empty values.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from .messages import (
    Button,
    ChannelMessage,
    ChannelMessageKind,
    HeroCard,
    ResponseKind,
    ResponseMessage,
)
from .struct import struct_to_json

logger = logging.getLogger("teamsflow.conversion.mapping")

DEFAULT_NAMESPACE = "teams"


def _as_mapping(body: Any) -> Mapping:
    return body if isinstance(body, Mapping) else {}


def _as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _map_text(body: Any, namespace: str) -> ChannelMessage:
    # Teams takes a single reply; only the first alternative is used
    alternatives = _as_list(_as_mapping(body).get("text"))
    text = str(alternatives[0]) if alternatives else ""
    return ChannelMessage(kind=ChannelMessageKind.MESSAGE, text=text)


def _map_image(body: Any, namespace: str) -> ChannelMessage:
    image_uri = _as_mapping(body).get("imageUri") or None
    return ChannelMessage(
        kind=ChannelMessageKind.ATTACHMENT,
        card=HeroCard(title="", image_url=image_uri),
    )


def _map_card(body: Any, namespace: str) -> ChannelMessage:
    card = _as_mapping(body)
    buttons = tuple(Button.from_dict(b) for b in _as_list(card.get("buttons")))
    return ChannelMessage(
        kind=ChannelMessageKind.ATTACHMENT,
        card=HeroCard(
            title=str(card.get("title") or ""),
            subtitle=card.get("subtitle") or None,
            image_url=card.get("imageUri") or None,
            buttons=buttons,
        ),
    )


def _map_quick_replies(body: Any, namespace: str) -> ChannelMessage:
    quick = _as_mapping(body)
    options = tuple(str(o) for o in _as_list(quick.get("quickReplies")))
    return ChannelMessage(
        kind=ChannelMessageKind.SUGGESTED_ACTIONS,
        text=quick.get("title"),
        actions=options,
    )


def _map_payload(body: Any, namespace: str) -> Optional[ChannelMessage]:
    payload = struct_to_json(body)
    if not isinstance(payload, Mapping):
        return None
    native = struct_to_json(payload.get(namespace))
    if not isinstance(native, Mapping):
        logger.debug(f"Payload has no '{namespace}' entry, skipping")
        return None
    return ChannelMessage(kind=ChannelMessageKind.PASSTHROUGH, payload=dict(native))


_MAPPERS: dict[str, Callable[[Any, str], Optional[ChannelMessage]]] = {
    ResponseKind.TEXT.value: _map_text,
    ResponseKind.IMAGE.value: _map_image,
    ResponseKind.CARD.value: _map_card,
    ResponseKind.QUICK_REPLIES.value: _map_quick_replies,
    ResponseKind.PAYLOAD.value: _map_payload,
}


def map_one(response: ResponseMessage, namespace: str = DEFAULT_NAMESPACE) -> Optional[ChannelMessage]:
    """Map a filtered response to a Teams message, or None if not renderable.

    Args:
        response: Normalised response message
        namespace: Key of this channel's entry inside custom payloads

    Returns:
        ChannelMessage, or None for kinds this channel does not render
    """
    kind = response.kind.value if isinstance(response.kind, ResponseKind) else response.kind
    mapper = _MAPPERS.get(kind)
    if mapper is None:
        logger.debug(f"No Teams mapping for response kind '{kind}', skipping")
        return None
    return mapper(response.body, namespace)
