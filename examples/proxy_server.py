#!/usr/bin/env python3
"""Serve cached Coral data in front of an upstream Coral proxy.

    python examples/proxy_server.py --upstream-url https://example.com/api/znc --storage redis
"""

import contextlib
import logging
import time

import click
import httpx
import uvicorn

from coral_cache import (
    CompositeObserver,
    CredentialError,
    InMemoryTokenStorage,
    LoggingObserver,
    MetricsObserver,
    ProxyCoralClient,
    RedisTokenStorage,
    SavedCredentials,
    ServiceConfig,
    StoredCredentialResolver,
    UpstreamError,
    coral_sessions,
)
from coral_cache.server import create_app
from coral_cache.utils.resilience import CircuitBreaker, CircuitBreakerConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option("--port", default=3000, help="Port to listen on for HTTP")
@click.option(
    "--log-level",
    default="INFO",
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option("--upstream-url", required=True, help="Base URL of the upstream Coral proxy")
@click.option(
    "--storage",
    type=click.Choice(["memory", "redis"], case_sensitive=False),
    default="memory",
    help="Where resolved credentials are kept",
)
@click.option("--redis-url", default="redis://localhost:6379/0", help="Redis URL for RedisTokenStorage")
@click.option("--redis-prefix", default="coral", help="Redis key prefix for RedisTokenStorage")
@click.option("--credentials-ttl", default=3600, help="Seconds resolved credentials are reused")
def main(
    port: int,
    log_level: str,
    upstream_url: str,
    storage: str,
    redis_url: str,
    redis_prefix: str,
    credentials_ttl: int,
) -> int:
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = ServiceConfig.from_dict(
        {
            "proxy": {"base_url": upstream_url},
            "storage": {"type": storage.lower(), "url": redis_url, "prefix": redis_prefix},
        }
    )

    token_storage = (
        InMemoryTokenStorage()
        if config.storage.type == "memory"
        else RedisTokenStorage(url=config.storage.url, prefix=config.storage.prefix)
    )
    breaker = CircuitBreaker(
        CircuitBreakerConfig(
            failure_threshold=config.resilience.failure_threshold,
            reset_timeout_seconds=config.resilience.reset_timeout_seconds,
        )
    )

    # One connection pool for every user; closed when the app shuts down.
    http = httpx.AsyncClient(timeout=config.proxy.timeout_seconds)

    @contextlib.asynccontextmanager
    async def lifespan(app):
        try:
            yield
        finally:
            await http.aclose()
            logger.info("Application shutting down...")

    async def authenticate(token: str, proxy_url: str | None) -> SavedCredentials:
        # The upstream proxy owns the real token exchange; ask it who we are.
        url = f"{proxy_url}/user"
        try:
            response = await http.get(url, headers={"Authorization": f"na {token}"})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}", status_code=0) from exc
        if response.status_code in (401, 403):
            raise CredentialError(f"Session token rejected by {url}")
        if response.status_code >= 400:
            raise UpstreamError(
                f"Unexpected status {response.status_code} from {url}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            user = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Invalid JSON from {url}", status_code=response.status_code, body=response.text) from exc
        return SavedCredentials(
            access_token=token,
            expires_at=time.time() + credentials_ttl,
            user_id=str(user.get("id", "")),
            user_name=str(user.get("name", "")),
            proxy_url=proxy_url,
        )

    def client_factory(token: str, credentials: SavedCredentials, proxy_url: str | None) -> ProxyCoralClient:
        return ProxyCoralClient.from_credentials(
            token,
            credentials,
            proxy_url,
            timeout_seconds=config.proxy.timeout_seconds,
            circuit_breaker=breaker if config.resilience.circuit_breaker_enabled else None,
            http_client=http,
        )

    resolver = StoredCredentialResolver(token_storage, authenticate, client_factory)
    sessions = coral_sessions(
        resolver,
        config.proxy.base_url,
        config=config.cache,
        observer=CompositeObserver(LoggingObserver(), MetricsObserver()),
    )

    logger.info("Serving cached Coral data from %s on port %d", upstream_url, port)
    uvicorn.run(create_app(sessions, lifespan=lifespan), host="127.0.0.1", port=port)
    return 0


if __name__ == "__main__":
    main()
