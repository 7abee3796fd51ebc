"""Settings for reaching the evaluation service."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "EXPRFORM_"


@dataclass(frozen=True)
class GatewayConfig:
    """Where and how expressions are submitted."""

    base_url: str = "http://localhost:8080"
    endpoint: str = "exp"
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            msg = f"timeout must be a positive finite number, got {self.timeout}"
            raise ValueError(msg)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.endpoint.lstrip('/')}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewayConfig:
        """Build a config from ``EXPRFORM_*`` variables, falling back to defaults.

        Raises:
            ValueError: If ``EXPRFORM_TIMEOUT`` is not a positive number

        """
        env = os.environ if environ is None else environ
        defaults = cls()
        raw_timeout = env.get(f"{ENV_PREFIX}TIMEOUT")
        if raw_timeout is None:
            timeout = defaults.timeout
        else:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                msg = f"{ENV_PREFIX}TIMEOUT must be a number, got {raw_timeout!r}"
                raise ValueError(msg) from None
        return cls(
            base_url=env.get(f"{ENV_PREFIX}BASE_URL", defaults.base_url),
            endpoint=env.get(f"{ENV_PREFIX}ENDPOINT", defaults.endpoint),
            timeout=timeout,
        )
