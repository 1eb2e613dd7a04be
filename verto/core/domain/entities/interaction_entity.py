# verto/core/domain/entities/interaction_entity.py

from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel

from ..enums.verto_enums import FeeTarget, InteractionAction

EXCHANGE_TAG_VALUE = "Verto"


class Tag(BaseModel):
    name: str
    value: str


def build_tags(action: InteractionAction, extra: Iterable[Tag] = ()) -> List[Tag]:
    """
    Canonical tag set for a Verto interaction:
    Exchange=Verto, Action=<action>, then the caller tags in order.
    """
    return [
        Tag(name="Exchange", value=EXCHANGE_TAG_VALUE),
        Tag(name="Action", value=action.value),
        *extra,
    ]


class InteractionReceipt(BaseModel):
    """
    What the interaction relay answers after posting a write.

    `type` / `result` are only present when the relay also evaluated the
    interaction against the contract (interactWriteWithResult semantics).
    """
    id: Optional[str] = None
    type: Optional[Literal["ok", "error", "exception"]] = None
    result: Optional[Dict[str, Any]] = None

    @property
    def succeeded(self) -> bool:
        return (
            self.id is not None
            and self.type == "ok"
            and (self.result or {}).get("status") == "success"
        )

    @property
    def message(self) -> str:
        return str((self.result or {}).get("message") or "Interaction failed")


class FeeResult(BaseModel):
    recipient: str
    fee_amount: int
    target: FeeTarget


def get_tag_value(name: str, tags: Iterable[Any]) -> Optional[str]:
    """First value of tag `name` in a list of Tag models or raw {"name", "value"} dicts."""
    for tag in tags:
        tag_name = tag.name if isinstance(tag, Tag) else tag.get("name")
        if tag_name == name:
            return tag.value if isinstance(tag, Tag) else tag.get("value")
    return None
