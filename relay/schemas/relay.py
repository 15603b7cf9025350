"""Response models returned to the webhook caller."""

from typing import Literal

from pydantic import BaseModel


class RelayResponse(BaseModel):
    """Outcome of relaying one push event.

    ``status`` is ``"triggered"`` when a build was created and ``"ignored"``
    when the push was deliberately dropped (``reason`` says why).
    """

    status: Literal["triggered", "ignored"]
    reason: str | None = None
    build_url: str | None = None
    build_number: int | None = None
