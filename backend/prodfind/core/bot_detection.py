"""Bot verification for content-creating mutations."""

import logging
import re

import httpx
from fastapi import Depends, Request

from prodfind.core.auth import SessionContext, get_session_context
from prodfind.core.config import settings
from prodfind.core.errors import UnauthorizedError
from prodfind.core.rate_limiter import BurstLimiter

logger = logging.getLogger(__name__)

BOT_USER_AGENT_PATTERN = re.compile(
    r"bot|crawl|spider|slurp|scrapy|curl|wget|python-requests|python-httpx"
    r"|headless|phantomjs|selenium|puppeteer|playwright",
    re.IGNORECASE,
)


class BotDetector:
    """Flags requests from automated clients.

    A request is a bot when its User-Agent is missing or looks automated, when
    its client exceeds the mutation burst limit, or when the optional remote
    verifier says so.
    """

    def __init__(
        self,
        max_mutations_per_minute: int,
        verify_url: str = "",
        max_tracked_clients: int = 10_000,
    ):
        self.limiter = BurstLimiter(
            max_requests=max_mutations_per_minute,
            window_seconds=60,
            max_keys=max_tracked_clients,
        )
        self.verify_url = verify_url

    def is_bot(self, request: Request, key: str) -> bool:
        user_agent = request.headers.get("User-Agent", "")
        if not user_agent or BOT_USER_AGENT_PATTERN.search(user_agent):
            logger.info("Rejected automated user agent %r for %s", user_agent, key)
            return True
        if not self.limiter.is_allowed(key):
            logger.info("Rejected mutation burst from %s", key)
            return True
        if self.verify_url:
            return self._verify_remote(request, user_agent)
        return False

    def _verify_remote(self, request: Request, user_agent: str) -> bool:
        client_ip = request.client.host if request.client else None
        try:
            with httpx.Client(timeout=5.0) as client:
                resp = client.post(
                    self.verify_url,
                    json={"userAgent": user_agent, "ip": client_ip},
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Bot verification request failed: %s", exc)
            return False
        if not isinstance(data, dict):
            logger.warning("Bot verification returned unexpected payload: %r", data)
            return False
        return bool(data.get("isBot", False))

    def reset(self) -> None:
        self.limiter.reset()


bot_detector = BotDetector(
    max_mutations_per_minute=settings.BOT_MAX_MUTATIONS_PER_MINUTE,
    verify_url=settings.BOT_VERIFY_URL,
    max_tracked_clients=settings.BOT_MAX_TRACKED_CLIENTS,
)


def _client_key(request: Request, context: SessionContext) -> str:
    if context.user_id is not None:
        return f"user:{context.user_id}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def reject_bots(
    request: Request,
    context: SessionContext = Depends(get_session_context),
) -> None:
    """Dependency guarding mutations that publish user content."""
    if not settings.BOT_DETECTION_ENABLED:
        return
    if bot_detector.is_bot(request, _client_key(request, context)):
        raise UnauthorizedError("Bot verification failed")
