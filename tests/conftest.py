import os

import aws_cdk as cdk
import pytest
from aws_cdk import aws_iam as iam

from deliveryflow.logging import clear_synthesis_context
from deliveryflow.settings import _reload_settings

ENV = cdk.Environment(account="123456789012", region="us-east-1")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Start every test from default settings and an empty synthesis context."""
    for name in list(os.environ):
        if name.startswith("DELIVERYFLOW_"):
            monkeypatch.delenv(name, raising=False)
    _reload_settings()
    yield
    clear_synthesis_context()


@pytest.fixture
def app():
    return cdk.App()


@pytest.fixture
def stack(app):
    return cdk.Stack(app, "TestStack", env=ENV)


@pytest.fixture
def role(stack):
    return iam.Role(stack, "Role", assumed_by=iam.ServicePrincipal("firehose.amazonaws.com"))
