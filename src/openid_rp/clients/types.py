from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, Tuple, Union

CallbackParams = Union[Mapping[str, Any], Iterable[Tuple[str, str]]]


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of direct verification.

    ``ok`` is ``False`` for a rejected assertion or a replayed nonce; those
    are not errors.
    """

    return_to: Optional[str]
    identity: Optional[str]
    ok: bool


class OpenIDClient(Protocol):
    async def build_auth_url(self, request_host: str, return_to: str, *, scheme: str = "http") -> str:
        ...

    async def verify_callback(self, params: CallbackParams) -> VerificationResult:
        ...
