"""Host runtime services and the dialog content they render."""

from typing import Literal, Optional, Protocol, Sequence, Union

from pydantic import BaseModel

DialogType = Literal["confirmation", "alert", "prompt"]


class DialogNode(BaseModel):
    """One line of dialog content."""

    type: Literal["heading", "text", "divider", "copyable", "sensitive"]
    value: str = ""


def heading(value: str) -> DialogNode:
    return DialogNode(type="heading", value=value)


def text(value: str) -> DialogNode:
    return DialogNode(type="text", value=value)


def divider() -> DialogNode:
    return DialogNode(type="divider")


def copyable(value: str) -> DialogNode:
    return DialogNode(type="copyable", value=value)


def sensitive(value: str) -> DialogNode:
    """Copyable content the host should blur until revealed."""
    return DialogNode(type="sensitive", value=value)


class HostServices(Protocol):
    """Dialog facility of the host runtime."""

    async def show_dialog(
        self,
        content: Sequence[DialogNode],
        dialog_type: DialogType = "confirmation",
    ) -> Optional[Union[bool, str]]:
        """Render a dialog and return the user's answer.

        Confirmation dialogs answer True or a falsy value; alerts answer None.
        """
        ...
