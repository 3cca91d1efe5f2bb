"""Identity token verification delegated to the provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codec import MalformedResponse, decode_verification, encode_id_token
from .errors import ErrorKind, RemoteVerifyFailure
from .result import Err, Ok, Result
from .status import error_for_status

if TYPE_CHECKING:
    from .gateway import HttpGateway
    from .protocols import Claims


class RemoteTokenVerifier:
    """Asks the provider whether a token is valid.

    Costs one request per verification and trusts the provider's verdict;
    no cryptography happens locally. Prefer ``LocalTokenVerifier`` on hot
    paths.
    """

    def __init__(self, gateway: HttpGateway, app_id: str) -> None:
        self._gateway = gateway
        self._path = f"/token/verify/{app_id}"

    def verify(self, token: str) -> Result[Claims, RemoteVerifyFailure]:
        """Verify ``token`` with the provider and return its claims.

        A 200 response that is not shaped ``{headers, claims}`` is reported as
        ``invalid_token``.
        """
        match self._gateway.post(self._path, encode_id_token(token)):
            case Err(failure):
                return Err(failure)
            case Ok(response) if response.status_code != 200:
                return Err(error_for_status(response.status_code))
            case Ok(response):
                try:
                    return Ok(decode_verification(response.body))
                except MalformedResponse:
                    return Err(ErrorKind.INVALID_TOKEN)
