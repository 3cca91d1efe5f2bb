"""Passwordless sign-in flows: start, confirm a code, refresh."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from .codec import (
    MalformedResponse,
    TokenPair,
    decode_refreshed,
    decode_token_pair,
    encode_code,
    encode_refresh_token,
    encode_start,
)
from .errors import ErrorKind, RefreshFailure, StartFailure, SubmitFailure
from .result import Err, Ok, Result
from .status import error_for_status

if TYPE_CHECKING:
    from .gateway import HttpGateway


class Flow(StrEnum):
    """How the provider reaches the user.

    OTP emails a one-time code to submit with ``submit_code``; MAGIC emails a
    link that redirects back to the application.
    """

    OTP = "otp"
    MAGIC = "magic"


class AuthenticationFlows:
    """Starts sign-in flows and exchanges codes and refresh tokens.

    Only ``start_authentication`` sends the API key; code confirmation and
    refresh are public endpoints gated by possession of the code or token.
    """

    def __init__(self, gateway: HttpGateway, app_id: str) -> None:
        self._gateway = gateway
        self._app_id = app_id

    def start_authentication(self, email: str, flow: Flow) -> Result[None, StartFailure]:
        """Ask the provider to email ``email`` a code or a magic link.

        Raises:
            ValueError: If ``email`` is empty or ``flow`` is not a known flow.
        """
        if not email:
            raise ValueError("email cannot be empty")
        flow = Flow(flow)

        match self._gateway.post(
            f"/{flow}/request/{self._app_id}", encode_start(email), authorize=True
        ):
            case Err(failure):
                return Err(failure)
            case Ok(response) if response.status_code != 200:
                return Err(error_for_status(response.status_code))
            case Ok(_):
                return Ok(None)

    def submit_code(self, email: str, code: str) -> Result[TokenPair, SubmitFailure]:
        """Confirm the one-time code the user received.

        A 200 response without an identity token is ``invalid_response``.
        """
        match self._gateway.post(f"/otp/confirm/{self._app_id}", encode_code(email, code)):
            case Err(failure):
                return Err(failure)
            case Ok(response) if response.status_code != 200:
                return Err(error_for_status(response.status_code))
            case Ok(response):
                try:
                    return Ok(decode_token_pair(response.body))
                except MalformedResponse:
                    return Err(ErrorKind.INVALID_RESPONSE)

    def refresh(self, refresh_token: str) -> Result[str, RefreshFailure]:
        """Exchange a refresh token for a new identity token.

        The rotated refresh token returned by the provider is discarded. A 200
        response of unexpected shape is ``authentication_failure``.
        """
        match self._gateway.post(
            f"/token/refresh/{self._app_id}", encode_refresh_token(refresh_token)
        ):
            case Err(failure):
                return Err(failure)
            case Ok(response) if response.status_code != 200:
                return Err(error_for_status(response.status_code))
            case Ok(response):
                try:
                    return Ok(decode_refreshed(response.body))
                except MalformedResponse:
                    return Err(ErrorKind.AUTHENTICATION_FAILURE)
