# src/pinecone_kit/config.py

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .errors import ConfigurationError

API_KEY_ENV_VAR = "PINECONE_API_KEY"
BASE_URL_ENV_VAR = "PINECONE_BASE_URL"


@dataclass(frozen=True)
class PineconeConfig:
    """Connection settings for a single Pinecone index.

    Immutable. Explicit values win; the environment is only a fallback,
    consulted once by ``resolve``.
    """

    api_key: str | None = None
    base_url: str | None = None  # index endpoint, e.g. https://<index>.svc.<env>.pinecone.io
    namespace: str | None = None

    def resolve(self, environ: Mapping[str, str] | None = None) -> "PineconeConfig":
        """Fill missing values from the environment.

        Args:
            environ: Mapping to read fallbacks from. Defaults to ``os.environ``.

        Returns:
            A new config with ``api_key`` and ``base_url`` set.

        Raises:
            ConfigurationError: If either value is still missing.
        """
        env = os.environ if environ is None else environ
        api_key = self.api_key or env.get(API_KEY_ENV_VAR)
        base_url = self.base_url or env.get(BASE_URL_ENV_VAR)

        if not api_key:
            raise ConfigurationError(
                "Missing Pinecone API key. Please provide one in the config "
                f"or set the {API_KEY_ENV_VAR} environment variable."
            )
        if not base_url:
            raise ConfigurationError(
                "Missing Pinecone base URL. Please provide one in the config "
                f"or set the {BASE_URL_ENV_VAR} environment variable."
            )

        return replace(self, api_key=api_key, base_url=base_url)
