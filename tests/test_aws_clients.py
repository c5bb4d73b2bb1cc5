"""Credential resolution for boto3 service clients."""

from __future__ import annotations

import base64

import pytest

from arcana.config.settings import settings
from arcana.services import aws
from arcana.services.llm_client import _decode_bedrock_api_key


@pytest.fixture
def boto_calls(monkeypatch):
    calls: list[tuple[str, dict]] = []

    def fake_client(service_name, **kwargs):
        calls.append((service_name, kwargs))
        return object()

    monkeypatch.setattr(aws.boto3, "client", fake_client)
    monkeypatch.setattr(settings.aws, "access_key", None)
    monkeypatch.setattr(settings.aws, "secret_key", None)
    return calls


def test_explicit_credentials_win(boto_calls, monkeypatch):
    monkeypatch.setattr(settings.aws, "access_key", "SETTINGS_AK")
    monkeypatch.setattr(settings.aws, "secret_key", "SETTINGS_SK")

    aws.create_boto3_client("bedrock-runtime", region_name="us-west-2", credentials=("AK", "SK"))

    assert boto_calls == [
        (
            "bedrock-runtime",
            {"region_name": "us-west-2", "aws_access_key_id": "AK", "aws_secret_access_key": "SK"},
        )
    ]


def test_static_settings_are_used_without_explicit_credentials(boto_calls, monkeypatch):
    monkeypatch.setattr(settings.aws, "access_key", "SETTINGS_AK")
    monkeypatch.setattr(settings.aws, "secret_key", "SETTINGS_SK")

    aws.create_boto3_client("polly")

    _, kwargs = boto_calls[0]
    assert kwargs["aws_access_key_id"] == "SETTINGS_AK"
    assert kwargs["aws_secret_access_key"] == "SETTINGS_SK"
    assert kwargs["region_name"] == settings.aws.region


def test_default_chain_when_nothing_is_configured(boto_calls):
    aws.create_boto3_client("polly", region_name="eu-west-1")

    assert boto_calls == [("polly", {"region_name": "eu-west-1"})]


def test_bedrock_api_key_decodes_to_credential_pair():
    encoded = base64.b64encode(b"AKIDEXAMPLE:secret/key").decode()

    assert _decode_bedrock_api_key(f'"{encoded}"') == ("AKIDEXAMPLE", "secret/key")
    assert _decode_bedrock_api_key("") is None
