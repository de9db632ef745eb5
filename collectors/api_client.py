"""Bitquery GraphQL HTTP 클라이언트.

  - POST {query, variables}, Bearer 토큰 인증
  - Session: aiohttp 세션 중앙 관리 (lazy 생성, 외부 주입 가능)
  - Timeout: 요청별 total / connect timeout

열화 규칙:
  - 이 모듈은 실패 시 예외를 던진다 (BitqueryError / aiohttp.ClientError / TimeoutError)
  - 체인 단위로 잡아서 "데이터 없음" 처리하는 것은 fetch_orchestrator 담당
  - 재시도 없음
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

logger = logging.getLogger(__name__)


class BitqueryError(Exception):
    """Bitquery 요청 실패 (HTTP 상태 오류, GraphQL errors, 잘못된 응답)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass
class BitqueryClientConfig:
    """BitqueryClient 설정."""
    total_timeout: float = 15.0
    connect_timeout: float = 5.0


class BitqueryClient:
    """Bitquery GraphQL 클라이언트.

    사용법:
        async with BitqueryClient(api_key) as client:
            data = await client.execute(BITQUERY_V2_ENDPOINT, query, {"network": "eth"})
    """

    def __init__(
        self,
        api_key: str,
        config: BitqueryClientConfig | None = None,
        session: aiohttp.ClientSession | None = None,
        name: str = "bitquery",
    ) -> None:
        """
        Args:
            api_key: Bitquery API 키 (Bearer 토큰).
            config: timeout 설정.
            session: 공유 세션. None이면 내부 생성 후 close()에서 종료.
        """
        self._api_key = api_key
        self._config = config or BitqueryClientConfig()
        self._name = name
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    async def __aenter__(self) -> "BitqueryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def execute(
        self,
        endpoint: str,
        query: str,
        variables: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GraphQL 쿼리 실행.

        Args:
            endpoint: GraphQL endpoint URL.
            query: GraphQL 쿼리 본문.
            variables: 쿼리 변수.

        Returns:
            응답의 `data` 객체.

        Raises:
            BitqueryError: 2xx 외 상태, GraphQL errors, data 누락.
            aiohttp.ClientError: 네트워크 오류.
            asyncio.TimeoutError: timeout 초과.
        """
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        timeout = aiohttp.ClientTimeout(
            total=self._config.total_timeout,
            connect=self._config.connect_timeout,
        )

        session = await self._get_session()
        async with session.post(
            endpoint, json=body, headers=headers, timeout=timeout,
        ) as resp:
            if not 200 <= resp.status < 300:
                error_body = await resp.text()
                logger.warning(
                    "[%s] HTTP %d: %s", self._name, resp.status, endpoint,
                )
                raise BitqueryError(
                    f"API request failed with status {resp.status}: {error_body}",
                    status=resp.status,
                )
            payload = await resp.json(content_type=None)

        return self._extract_data(payload)

    async def close(self) -> None:
        """세션 종료 (직접 만든 세션만)."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug("[%s] HTTP client closed", self._name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """세션 lazy 생성."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    @staticmethod
    def _extract_data(payload: Any) -> dict[str, Any]:
        """GraphQL 응답에서 data 추출. errors가 있으면 첫 메시지로 실패."""
        if not isinstance(payload, dict):
            raise BitqueryError("GraphQL 응답 형식 오류")

        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise BitqueryError(message or "GraphQL error")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise BitqueryError("GraphQL 응답에 data 없음")
        return data


# =============================================================================
# Helper: 환경변수에서 API 키 로드
# =============================================================================


def get_api_key(env_name: str, required: bool = False) -> str | None:
    """환경변수에서 API 키 로드.

    Args:
        env_name: 환경변수 이름.
        required: 필수 여부.

    Returns:
        API 키 또는 None.

    Raises:
        ValueError: required=True인데 키가 없는 경우.
    """
    key = os.environ.get(env_name)
    if required and not key:
        raise ValueError(f"환경변수 {env_name} 필요")
    if key:
        logger.debug("API key loaded: %s=***%s", env_name, key[-4:])
    return key
