"""HTTP client for the remote evaluation service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Self

import requests

from exprform.codecs import to_builtins
from exprform.config import GatewayConfig
from exprform.errors import TransportError
from exprform.nodes import Expression

if TYPE_CHECKING:
    from types import TracebackType

    from exprform.builder import Builder

logger = logging.getLogger(__name__)

_MAX_BODY_LOGGED = 200


@dataclass(frozen=True)
class SubmissionResponse:
    """Successful reply from the evaluation service."""

    msg: str


class ExpressionGateway:
    """Submits materialized expressions with ``POST {base_url}/{endpoint}``.

    Only complete ``Expression`` trees are accepted; a builder has to be
    materialized first (``submit_builder`` does both).
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config if config is not None else GatewayConfig.from_env()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def submit(self, expression: Expression) -> SubmissionResponse:
        """Send one expression and return the service's reply.

        Raises:
            TypeError: If ``expression`` is not a materialized Expression
            TransportError: If the request fails, the status is not 2xx, or
                the body has no string ``msg``

        """
        if not isinstance(expression, Expression):
            msg = (
                "Only materialized Expression trees can be submitted, "
                f"got {type(expression).__name__}"
            )
            raise TypeError(msg)

        url = self.config.url
        logger.info("Submitting %s to %s", expression, url)
        try:
            response = self.session.post(
                url,
                json=to_builtins(expression),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            msg = f"Could not reach {url}: {exc}"
            raise TransportError(msg) from exc

        if not 200 <= response.status_code < 300:  # noqa: PLR2004
            body = response.text
            logger.warning(
                "Service at %s answered %d: %s",
                url,
                response.status_code,
                body[:_MAX_BODY_LOGGED],
            )
            msg = f"Service at {url} answered {response.status_code}"
            raise TransportError(msg, status_code=response.status_code, body=body)

        return SubmissionResponse(msg=self._read_msg(response))

    def submit_builder(self, builder: Builder) -> SubmissionResponse:
        """Materialize ``builder`` and submit the result.

        Raises:
            MaterializeError: If the builder does not hold a complete tree
            TransportError: See ``submit``

        """
        return self.submit(builder.materialize().unwrap())

    def _read_msg(self, response: requests.Response) -> str:
        try:
            data: Any = response.json()
        except ValueError as exc:
            msg = "Response body is not valid JSON"
            raise TransportError(
                msg, status_code=response.status_code, body=response.text
            ) from exc
        if not isinstance(data, dict) or not isinstance(data.get("msg"), str):
            msg = "Response body has no string 'msg' field"
            raise TransportError(
                msg, status_code=response.status_code, body=response.text
            )
        return data["msg"]

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class SubmissionState(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Submission:
    """One request for one materialized expression.

    The expression is kept so a failed submission can be retried without
    walking the builder again.
    """

    def __init__(self, expression: Expression) -> None:
        self.expression = expression
        self.state = SubmissionState.PENDING
        self.response: SubmissionResponse | None = None
        self.error: TransportError | None = None
        self.attempts = 0

    def send(self, gateway: ExpressionGateway) -> SubmissionResponse | None:
        """Submit (or resubmit) the expression through ``gateway``.

        Transport failures are recorded on the submission instead of raised.
        Returns the response on success, None on failure.
        """
        self.state = SubmissionState.PENDING
        self.error = None
        self.attempts += 1
        try:
            self.response = gateway.submit(self.expression)
        except TransportError as exc:
            self.state = SubmissionState.FAILED
            self.error = exc
            return None
        self.state = SubmissionState.SUCCEEDED
        return self.response
