import logging
import os
from pathlib import Path

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
for _var in (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "S3_BUCKET_NAME",
    "CLOUDFRONT_DOMAIN",
    "HEALTH_PROBE_TIMEOUT_SECONDS",
):
    os.environ.pop(_var, None)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mediaops.core.config import AwsConfig
from mediaops.core.log_leak_scan import format_report, scan_file
from mediaops.db.base import Base
import mediaops.db.models  # noqa: F401


@pytest.fixture(scope="session", autouse=True)
def _capture_logs_for_leak_scan():
    base_dir = Path(__file__).resolve().parents[1]
    log_dir = base_dir / ".pytest_logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "pytest.log"

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    previous_level = root_logger.level
    root_logger.setLevel(logging.INFO)

    try:
        yield log_path
    finally:
        root_logger.removeHandler(handler)
        root_logger.setLevel(previous_level)
        handler.close()
        violations = scan_file(log_path)
        if violations:
            pytest.fail(format_report(violations))


@pytest.fixture()
def aws_config() -> AwsConfig:
    return AwsConfig(
        region="us-east-1",
        bucket="media-bucket",
        cdn_domain="d111111abcdef8.cloudfront.net",
        access_key_id="test-access-key-id",
        secret_access_key="test-secret-access-key",
        probe_timeout_seconds=2.0,
    )


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    try:
        yield SessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(session_factory):
    from fastapi.testclient import TestClient

    from mediaops.db.session import get_db
    from mediaops.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
