from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from mediaops.core.config import AwsConfig
from mediaops.core.errors import InternalError, ValidationError
from mediaops.core.media_urls import build_media_urls, generate_object_key, parse_s3_url
from mediaops.deps import get_aws_config
from mediaops.schemas.api_contract import MediaUrlsResponse

router = APIRouter()


def _payload(bucket: str, region: str, key: str, cdn_domain: str) -> dict:
    urls = build_media_urls(bucket, region, key, cdn_domain or None)
    return {
        "bucket": bucket,
        "region": region,
        "key": key.strip().lstrip("/"),
        "direct_url": urls.direct_url,
        "cdn_url": urls.cdn_url,
    }


@router.get("/media/urls", response_model=MediaUrlsResponse)
def media_urls(
    key: Optional[str] = Query(None, description="Object key inside the media bucket"),
    url: Optional[str] = Query(None, description="Full S3 URL; bucket/region/key are taken from it"),
    config: AwsConfig = Depends(get_aws_config),
) -> MediaUrlsResponse:
    if url:
        loc = parse_s3_url(url)
        if loc is None:
            raise ValidationError("url is not a recognizable S3 object URL")
        return _payload(loc.bucket, loc.region, loc.key, config.cdn_domain)
    if not (key or "").strip():
        raise ValidationError("Object key is required")
    if not config.bucket:
        raise InternalError("S3 bucket name not configured")
    return _payload(config.bucket, config.region, key, config.cdn_domain)


@router.get("/media/object-key", response_model=MediaUrlsResponse)
def new_object_key(
    filename: str = Query(..., min_length=1),
    prefix: str = Query("videos"),
    config: AwsConfig = Depends(get_aws_config),
) -> MediaUrlsResponse:
    if not config.bucket:
        raise InternalError("S3 bucket name not configured")
    key = generate_object_key(prefix, filename)
    return _payload(config.bucket, config.region, key, config.cdn_domain)
