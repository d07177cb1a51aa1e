# mediaops/deps.py
from __future__ import annotations

from fastapi import Depends

from mediaops.core.config import AwsConfig, settings, settings_source
from mediaops.services.health import HealthAggregator


def get_aws_config() -> AwsConfig:
    return AwsConfig.from_settings(settings)


def get_settings_env() -> dict[str, str]:
    return settings_source()


def get_health_aggregator(config: AwsConfig = Depends(get_aws_config)) -> HealthAggregator:
    return HealthAggregator(config)
