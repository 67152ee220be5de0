"""Liveness/readiness HTTP endpoints and service status checks.

The bot runs a tiny aiohttp server next to the Discord client so container
platforms can probe it:

* ``/live``   - process is up (always 200), with session uptime
* ``/ready``  - Discord connected (healthy or degraded)
* ``/health`` - full report of every registered check

Example:
    checker = HealthChecker(version="1.0.0", uptime=tracker)
    checker.add_check("discord", check_discord)
    server = await start_health_server(checker, port=8080)
"""

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from aiohttp import web

from rapibot.core.logging import get_logger
from rapibot.core.uptime import UptimeTracker

logger = get_logger(__name__)

CHECK_TIMEOUT_SECONDS = 10.0


class ServiceStatus(Enum):
    """Status of an individual service."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


@dataclass
class ServiceCheck:
    """Result of a single service health check."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Aggregated health report for all services."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None
    uptime: str | None = None
    commands_executed: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "uptime": self.uptime,
            "commands_executed": self.commands_executed,
            "checks": [
                {
                    "name": check.name,
                    "status": check.status.value,
                    "latency_ms": check.latency_ms,
                    "message": check.message,
                    "details": check.details,
                }
                for check in self.checks
            ],
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]


def overall_status(checks: list[ServiceCheck]) -> ServiceStatus:
    """Worst status wins: unhealthy > degraded > unknown > healthy."""
    if all(c.status == ServiceStatus.HEALTHY for c in checks):
        return ServiceStatus.HEALTHY
    if any(c.status == ServiceStatus.UNHEALTHY for c in checks):
        return ServiceStatus.UNHEALTHY
    if any(c.status == ServiceStatus.DEGRADED for c in checks):
        return ServiceStatus.DEGRADED
    return ServiceStatus.UNKNOWN


class HealthChecker:
    """Runs registered service checks and aggregates them into a report."""

    def __init__(
        self,
        version: str | None = None,
        uptime: UptimeTracker | None = None,
    ) -> None:
        """Initialize the health checker.

        Args:
            version: Application version to include in health reports.
            uptime: Session tracker whose uptime and command count are reported.
        """
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version
        self._uptime = uptime

    @property
    def uptime(self) -> UptimeTracker | None:
        return self._uptime

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        """Register a health check function."""
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        """Remove a registered health check."""
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run a single health check.

        A check that raises or exceeds the timeout is reported as unhealthy
        rather than propagating.

        Raises:
            KeyError: If no check is registered with that name.
        """
        if name not in self._checks:
            raise KeyError(f"No health check registered for: {name}")

        loop = asyncio.get_running_loop()
        start = loop.time()

        def elapsed_ms() -> float:
            return round((loop.time() - start) * 1000, 2)

        try:
            result = await asyncio.wait_for(
                self._checks[name](), timeout=CHECK_TIMEOUT_SECONDS
            )
        except TimeoutError:
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message="Health check timed out",
            )
        except Exception as ex:
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=elapsed_ms(),
                message=str(ex),
            )

        if result.latency_ms is None:
            result.latency_ms = elapsed_ms()
        return result

    async def check_all(self) -> HealthReport:
        """Run all registered health checks concurrently."""
        timestamp = datetime.now(UTC).isoformat()

        names = list(self._checks)
        checks = list(await asyncio.gather(*(self.check_one(n) for n in names)))

        return HealthReport(
            status=overall_status(checks),
            timestamp=timestamp,
            checks=checks,
            version=self._version,
            uptime=self._uptime.formatted_uptime() if self._uptime else None,
            commands_executed=self._uptime.commands_executed if self._uptime else None,
        )


class HealthServer:
    """aiohttp server exposing ``/live``, ``/ready`` and ``/health``."""

    def __init__(
        self,
        checker: HealthChecker,
        host: str = "0.0.0.0",
        port: int = 8080,
    ) -> None:
        self._checker = checker
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes."""
        app = web.Application()
        app.router.add_get("/", self._handle_live)
        app.router.add_get("/live", self._handle_live)
        app.router.add_get("/ready", self._handle_ready)
        app.router.add_get("/health", self._handle_health)
        return app

    async def _handle_health(self, request: web.Request) -> web.Response:
        report = await self._checker.check_all()
        status_code = 200 if report.status == ServiceStatus.HEALTHY else 503

        logger.info(
            "health_check",
            status=report.status.value,
            checks={c.name: c.status.value for c in report.checks},
        )

        return web.json_response(report.to_dict(), status=status_code)

    async def _handle_ready(self, request: web.Request) -> web.Response:
        report = await self._checker.check_all()
        is_ready = report.status in (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)

        return web.json_response(
            {"ready": is_ready, "status": report.status.value},
            status=200 if is_ready else 503,
        )

    async def _handle_live(self, request: web.Request) -> web.Response:
        body: dict[str, Any] = {"alive": True}
        if self._checker.uptime is not None:
            body["uptime"] = self._checker.uptime.formatted_uptime()
        return web.json_response(body, status=200)

    async def start(self) -> None:
        """Start listening."""
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()

        logger.info("health_server_started", host=self._host, port=self._port)

    async def stop(self) -> None:
        """Stop the health server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("health_server_stopped")


async def start_health_server(
    checker: HealthChecker,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> HealthServer:
    """Create and start a HealthServer.

    Returns:
        The running HealthServer instance.
    """
    server = HealthServer(checker, host, port)
    await server.start()
    return server
