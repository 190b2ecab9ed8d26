from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from urllib.parse import quote

import httpx
from loguru import logger

from crowdhandler_sdk.agent_lang import (
    AgentLanguageProvider,
    StaticAgentLanguageProvider,
    resolve_agent_language,
)
from crowdhandler_sdk.diagnostics import DiagnosticChannel, DiagnosticEvent, DiagnosticKind
from crowdhandler_sdk.errors import ApiError
from crowdhandler_sdk.result import QueueDecision

DEFAULT_BASE_URL = "https://api.crowdhandler.com/v1"
DEFAULT_TIMEOUT_SECONDS = 10.0

_DECISION_SUCCESS_CODES = (200, 201)
_REPORT_SUCCESS_CODE = 200


class RequestSession:
    """Session-scoped access to the CrowdHandler /requests and /responses API.

    Decision calls (``create_request``, ``get_request``, ``create_or_fetch``)
    never raise: timeouts, transport errors, undecodable bodies and non-2xx
    statuses all yield ``QueueDecision.fail_open()`` and a diagnostic event.
    ``report_elapsed_time`` swallows every network outcome the same way.

    Concurrent calls on one session are last-write-wins on ``token`` unless
    ``serialize=True``, which holds a lock across token read, request and
    token write.

    Without an injected ``client`` each call opens and closes its own
    ``httpx.AsyncClient``, so the session holds no connections between calls
    and can be driven from successive ``asyncio.run`` invocations. An
    injected client stays the caller's to close.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        agent_language: AgentLanguageProvider | None = None,
        diagnostics: DiagnosticChannel | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        serialize: bool = False,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self.token = token
        self._timeout_seconds = timeout_seconds
        self._agent_language = agent_language or StaticAgentLanguageProvider()
        self.diagnostics = diagnostics or DiagnosticChannel()
        self._client = client
        self._transport = transport
        self._serialize = serialize
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    # -- public operations --

    async def create_request(self, target_url: str) -> QueueDecision:
        """POST /requests. Obtains a first token; fails open on any error."""
        async with self._guard():
            return await self._create_request(target_url)

    async def get_request(self, target_url: str) -> QueueDecision:
        """GET /requests/{token}. Fails open without I/O when no token is held."""
        async with self._guard():
            return await self._get_request(target_url)

    async def create_or_fetch(self, target_url: str) -> QueueDecision:
        async with self._guard():
            if self.token is None:
                return await self._create_request(target_url)
            return await self._get_request(target_url)

    async def report_elapsed_time(
        self,
        response_id: str,
        elapsed_ms: int,
        status_code: int = 200,
    ) -> None:
        """PUT /responses/{response_id}. Telemetry only; network failures are logged and dropped."""
        if not response_id:
            raise ValueError("response_id is required")
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")

        operation = f"PUT /responses/{response_id}"
        al = resolve_agent_language(self._agent_language)
        body = {
            "time": elapsed_ms,
            "httpCode": status_code,
            "agent": al.agent,
            "lang": al.lang,
        }
        url = f"{self._base_url}/responses/{quote(response_id, safe='')}"

        try:
            async with self._open_client() as client:
                response = await self._send(client.put(url, headers=self._headers(), json=body))
            if response.status_code != _REPORT_SUCCESS_CODE:
                raise ApiError(operation, response.status_code, response.text)
            logger.debug(f"Time spent updated: {response.text}")
        except (httpx.TimeoutException, asyncio.TimeoutError) as ex:
            self._emit(DiagnosticKind.REPORT_FAILED, operation, f"timed out after {self._timeout_seconds}s", error=ex)
        except ApiError as ex:
            self._emit(
                DiagnosticKind.REPORT_FAILED,
                operation,
                f"status {ex.status_code}: {ex.body}",
                status_code=ex.status_code,
                error=ex,
            )
        except Exception as ex:
            self._emit(DiagnosticKind.REPORT_FAILED, operation, f"failed: {ex}", error=ex)

    def update_token(self, new_token: str) -> None:
        logger.debug("CrowdHandler token updated")
        self.token = new_token

    # -- internals --

    async def _create_request(self, target_url: str) -> QueueDecision:
        al = resolve_agent_language(self._agent_language)
        body = {"url": target_url, "agent": al.agent, "lang": al.lang}
        url = f"{self._base_url}/requests"
        logger.debug(f"CrowdHandler POST /requests url={target_url}")
        return await self._decide(
            "POST /requests",
            lambda client: client.post(url, headers=self._headers(), json=body),
        )

    async def _get_request(self, target_url: str) -> QueueDecision:
        token = self.token
        if token is None:
            self._emit(
                DiagnosticKind.FALLBACK,
                "GET /requests",
                "called without token => fallback => promoted=1",
            )
            return QueueDecision.fail_open()

        al = resolve_agent_language(self._agent_language)
        params = {"url": target_url, "agent": al.agent, "lang": al.lang}
        url = f"{self._base_url}/requests/{quote(token, safe='')}"
        logger.debug(f"CrowdHandler GET /requests/{token} url={target_url}")
        return await self._decide(
            f"GET /requests/{token}",
            lambda client: client.get(url, headers=self._headers(), params=params),
        )

    async def _decide(
        self,
        operation: str,
        request: Callable[[httpx.AsyncClient], Awaitable[httpx.Response]],
    ) -> QueueDecision:
        try:
            async with self._open_client() as client:
                response = await self._send(request(client))
            if response.status_code not in _DECISION_SUCCESS_CODES:
                raise ApiError(operation, response.status_code, response.text)
            data = response.json()
            if not isinstance(data, dict) or "result" not in data:
                raise ValueError("Response body has no 'result' object")
            decision = QueueDecision.from_json(data["result"])
        except (httpx.TimeoutException, asyncio.TimeoutError) as ex:
            self._emit(DiagnosticKind.TIMEOUT, operation, f"timed out after {self._timeout_seconds}s", error=ex)
            return QueueDecision.fail_open()
        except ApiError as ex:
            self._emit(
                DiagnosticKind.API_ERROR,
                operation,
                f"status {ex.status_code}: {ex.body}",
                status_code=ex.status_code,
                error=ex,
            )
            return QueueDecision.fail_open()
        except Exception as ex:
            self._emit(DiagnosticKind.TRANSPORT_FAILURE, operation, f"failed: {ex}", error=ex)
            return QueueDecision.fail_open()

        # The server owns the token and may rotate or drop it
        self.token = decision.token
        logger.debug(f"CrowdHandler {operation} -> {decision}")
        return decision

    async def _send(self, call: Awaitable[httpx.Response]) -> httpx.Response:
        return await asyncio.wait_for(call, timeout=self._timeout_seconds)

    def _open_client(self) -> contextlib.AbstractAsyncContextManager[httpx.AsyncClient]:
        # httpx pools are bound to the loop that opened them; a session may span several loops
        if self._client is not None:
            return contextlib.nullcontext(self._client)
        return httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._transport)

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    def _guard(self) -> contextlib.AbstractAsyncContextManager:
        if not self._serialize:
            return contextlib.nullcontext()
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _emit(
        self,
        kind: DiagnosticKind,
        operation: str,
        message: str,
        *,
        status_code: int | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.diagnostics.emit(
            DiagnosticEvent(
                kind=kind,
                operation=operation,
                message=message,
                status_code=status_code,
                error=error,
            )
        )
