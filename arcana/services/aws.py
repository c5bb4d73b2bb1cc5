"""boto3 client factory shared by the Bedrock and Polly services.

Credentials resolve in this order: an explicit ``(access_key, secret_key)``
pair (the decoded ``BEDROCK_API_KEY``), the static ``AWS_*`` settings, then
boto3's default chain (environment, profile, instance role).
"""

from __future__ import annotations

import logging
from typing import Any

import boto3

from arcana.config.settings import settings

logger = logging.getLogger(__name__)


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    credentials: tuple[str, str] | None = None,
) -> Any:
    """Return a boto3 client for ``service_name`` in the configured region."""

    client_kwargs: dict[str, Any] = {"region_name": region_name or settings.aws.region}
    if credentials is None and settings.aws.access_key and settings.aws.secret_key:
        credentials = (settings.aws.access_key, settings.aws.secret_key)
    if credentials is not None:
        client_kwargs["aws_access_key_id"], client_kwargs["aws_secret_access_key"] = credentials

    logger.debug(
        "Creating %s client region=%s static_credentials=%s",
        service_name,
        client_kwargs["region_name"],
        credentials is not None,
    )
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
