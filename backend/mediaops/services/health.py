from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from mediaops.core.config import AwsConfig
from mediaops.core.storage import S3Storage

logger = logging.getLogger(__name__)


class CheckStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {CheckStatus.OK: 0, CheckStatus.DEGRADED: 1, CheckStatus.ERROR: 2}


@dataclass(frozen=True)
class ServiceCheckResult:
    service_name: str
    status: CheckStatus
    detail: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "detail": self.detail}


def reduce_status(statuses: Iterable[CheckStatus]) -> CheckStatus:
    """Worst status wins: ERROR > DEGRADED > OK. No results at all counts as OK."""
    worst = CheckStatus.OK
    for status in statuses:
        if status.severity > worst.severity:
            worst = status
    return worst


@dataclass(frozen=True)
class HealthReport:
    timestamp: datetime
    services: Mapping[str, ServiceCheckResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "services", MappingProxyType(dict(self.services)))

    @property
    def overall(self) -> CheckStatus:
        return reduce_status(r.status for r in self.services.values())

    def services_dict(self) -> dict[str, dict[str, Any]]:
        return {name: r.to_dict() for name, r in self.services.items()}


# =========================
# Probes
# =========================

class Probe(ABC):
    """A single named check. Subclasses implement `run` and may raise; the aggregator converts failures."""

    name: str = "probe"

    @abstractmethod
    def run(self) -> ServiceCheckResult:
        ...


class CredentialsProbe(Probe):
    name = "credentials"

    def __init__(self, config: AwsConfig) -> None:
        self._present = bool(config.access_key_id and config.secret_access_key)

    def run(self) -> ServiceCheckResult:
        if self._present:
            return ServiceCheckResult(self.name, CheckStatus.OK, "credentials present")
        return ServiceCheckResult(self.name, CheckStatus.ERROR, "missing credentials")


class StorageProbe(Probe):
    name = "storage"

    def __init__(
        self,
        config: AwsConfig,
        storage_factory: Callable[[AwsConfig], S3Storage] = S3Storage,
    ) -> None:
        self._config = config
        self._storage_factory = storage_factory

    def run(self) -> ServiceCheckResult:
        if not self._config.bucket:
            return ServiceCheckResult(self.name, CheckStatus.ERROR, "S3 bucket name not configured")
        storage = self._storage_factory(self._config)
        storage.check_bucket()
        return ServiceCheckResult(
            self.name,
            CheckStatus.OK,
            f"bucket {self._config.bucket} reachable in {self._config.region}",
        )


class CdnProbe(Probe):
    name = "cdn"

    def __init__(self, config: AwsConfig) -> None:
        self._domain = config.cdn_domain

    def run(self) -> ServiceCheckResult:
        if self._domain:
            return ServiceCheckResult(self.name, CheckStatus.OK, f"CDN domain {self._domain}")
        return ServiceCheckResult(
            self.name,
            CheckStatus.DEGRADED,
            "CDN domain not configured; media served directly from storage",
        )


def default_probes(config: AwsConfig) -> list[Probe]:
    return [CredentialsProbe(config), StorageProbe(config), CdnProbe(config)]


# =========================
# Aggregator
# =========================

class HealthAggregator:
    def __init__(
        self,
        config: AwsConfig,
        probes: Sequence[Probe] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.probes = list(probes) if probes is not None else default_probes(config)
        names = [p.name for p in self.probes]
        if len(set(names)) != len(names):
            raise ValueError(f"probe names must be unique: {names}")
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _failed(self, probe: Probe, detail: str) -> ServiceCheckResult:
        return ServiceCheckResult(probe.name, CheckStatus.ERROR, detail)

    def _run_one(self, probe: Probe) -> ServiceCheckResult:
        result = probe.run()
        if result.service_name != probe.name:
            # keep the registry key authoritative
            result = ServiceCheckResult(probe.name, result.status, result.detail)
        return result

    def perform_full_health_check(self) -> HealthReport:
        timeout = self.config.probe_timeout_seconds
        logger.info("health check started probes=%s timeout=%ss", [p.name for p in self.probes], timeout)

        results: dict[str, ServiceCheckResult] = {}
        if self.probes:
            pool = ThreadPoolExecutor(max_workers=len(self.probes), thread_name_prefix="health-probe")
            try:
                futures = [(p, pool.submit(self._run_one, p)) for p in self.probes]
                wait([f for _, f in futures], timeout=timeout)
                for probe, future in futures:
                    if not future.done():
                        results[probe.name] = self._failed(probe, f"timed out after {timeout:g}s")
                        continue
                    exc = future.exception()
                    if exc is not None:
                        results[probe.name] = self._failed(probe, str(exc) or type(exc).__name__)
                    else:
                        results[probe.name] = future.result()
            finally:
                # a hung probe must not hold the report
                pool.shutdown(wait=False, cancel_futures=True)

        report = HealthReport(timestamp=self._clock(), services=results)
        for name, r in report.services.items():
            log = logger.warning if r.status is not CheckStatus.OK else logger.info
            log("health probe %s status=%s detail=%s", name, r.status.value, r.detail)
        logger.info("health check finished overall=%s", report.overall.value)
        return report
