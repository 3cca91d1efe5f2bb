"""Provider identity configuration.

A ``ProviderIdentity`` is supplied once when a client is built and never
changes afterwards. It can be constructed directly or loaded from the
environment (optionally via a ``.env`` file):

    PURPLE_AUTH_HOST=https://purpleauth.com
    PURPLE_AUTH_APP_ID=<app id from the Purple Auth dashboard>
    PURPLE_AUTH_API_KEY=<api key, keep out of source control>
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_ENV_PREFIX = "PURPLE_AUTH_"


@dataclass(frozen=True, slots=True)
class ProviderIdentity:
    """Where the provider lives and which application we are.

    Attributes:
        host: Base URL of the provider, including scheme
            (e.g. "https://purpleauth.com").
        app_id: Application identifier, used as a path segment.
        api_key: Secret sent as a bearer token to the authorization-gated
            endpoints. Excluded from ``repr``.

    Raises:
        ValueError: If any attribute is empty.
    """

    host: str
    app_id: str
    api_key: str = field(repr=False)

    def __post_init__(self) -> None:
        for name in ("host", "app_id", "api_key"):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValueError(f"{name} cannot be empty")

    @property
    def issuer(self) -> str:
        """Expected ``iss`` claim of tokens issued for this application."""
        return f"{self.host}/app/{self.app_id}"

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX) -> ProviderIdentity:
        """Load the identity from ``{prefix}HOST``, ``{prefix}APP_ID`` and ``{prefix}API_KEY``.

        A ``.env`` file is loaded first if present; existing environment
        variables take precedence over it.

        Raises:
            ValueError: If any of the variables is missing or empty.
        """
        load_dotenv()

        names = {attr: f"{prefix}{attr.upper()}" for attr in ("host", "app_id", "api_key")}
        values = {attr: os.environ.get(var, "") for attr, var in names.items()}

        missing = [names[attr] for attr, value in values.items() if not value]
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        return cls(**values)
