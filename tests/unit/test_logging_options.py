"""Tests for destination error logging."""

import aws_cdk as cdk
import pytest
from aws_cdk import aws_iam as iam, aws_logs as logs
from aws_cdk.assertions import Template
from constructs import Construct

from deliveryflow.common.exceptions import ConfigurationError, ErrorCode
from deliveryflow.destinations.logging_options import LoggingBinding


@pytest.fixture
def scope(stack):
    return Construct(stack, "Destination")


def _policy_actions(stack):
    policies = Template.from_stack(stack).find_resources("AWS::IAM::Policy")
    return [
        statement["Action"]
        for policy in policies.values()
        for statement in policy["Properties"]["PolicyDocument"]["Statement"]
    ]


class TestCreateLoggingOptions:
    """Test LoggingBinding.create_logging_options."""

    def test_disabled_with_log_group(self, stack, scope, role):
        """Test that disabling logging contradicts a provided log group."""
        log_group = logs.LogGroup(stack, "Errors")

        with pytest.raises(ConfigurationError) as exc_info:
            LoggingBinding().create_logging_options(scope, role, "S3Destination", logging=False, log_group=log_group)

        assert exc_info.value.message == "Destination logging cannot be set to false when log_group is provided"
        assert exc_info.value.error_code == ErrorCode.CONFIG_CONTRADICTION

    def test_disabled(self, stack, scope, role):
        """Test that disabled logging creates nothing."""
        binding = LoggingBinding()

        assert binding.create_logging_options(scope, role, "S3Destination", logging=False) is None
        assert binding.log_group is None
        template = Template.from_stack(stack)
        template.resource_count_is("AWS::Logs::LogGroup", 0)
        template.resource_count_is("AWS::IAM::Policy", 0)

    def test_default_creates_log_group(self, stack, scope, role):
        """Test that a log group is created under the scope by default."""
        binding = LoggingBinding()

        result = binding.create_logging_options(scope, role, "S3Destination")

        log_group = scope.node.try_find_child("LogGroup")
        assert isinstance(log_group, logs.LogGroup)
        assert binding.log_group is log_group
        stream = log_group.node.try_find_child("S3Destination")
        assert isinstance(stream, logs.LogStream)
        assert result.config.enabled is True
        assert result.config.log_group_name == log_group.log_group_name
        assert result.config.log_stream_name == stream.log_stream_name
        assert len(result.dependables) == 1
        assert isinstance(result.dependables[0], iam.Grant)
        assert ["logs:CreateLogStream", "logs:PutLogEvents"] in _policy_actions(stack)

    def test_streams_share_one_group(self, stack, scope, role):
        """Test that call sites on one binder share the memoized group."""
        binding = LoggingBinding()

        first = binding.create_logging_options(scope, role, "S3Destination")
        second = binding.create_logging_options(scope, role, "S3Backup")

        template = Template.from_stack(stack)
        template.resource_count_is("AWS::Logs::LogGroup", 1)
        template.resource_count_is("AWS::Logs::LogStream", 2)
        assert first.config.log_group_name == second.config.log_group_name
        assert first.config.log_stream_name != second.config.log_stream_name

    def test_same_stream_id_reused(self, stack, scope, role):
        """Test that a repeated call site reuses its log stream."""
        binding = LoggingBinding()

        first = binding.create_logging_options(scope, role, "S3Destination")
        second = binding.create_logging_options(scope, role, "S3Destination")

        assert first.config.log_stream_name == second.config.log_stream_name
        Template.from_stack(stack).resource_count_is("AWS::Logs::LogStream", 1)

    def test_provided_log_group(self, stack, scope, role):
        """Test that a provided log group is used and memoized."""
        log_group = logs.LogGroup.from_log_group_name(stack, "Errors", "delivery-errors")
        binding = LoggingBinding()

        result = binding.create_logging_options(scope, role, "S3Destination", log_group=log_group)
        later = binding.create_logging_options(scope, role, "S3Backup")

        assert result.config.log_group_name == "delivery-errors"
        assert later.config.log_group_name == "delivery-errors"
        assert binding.log_group is log_group
        assert scope.node.try_find_child("LogGroup") is None
        Template.from_stack(stack).resource_count_is("AWS::Logs::LogGroup", 0)

    def test_logging_true_without_group(self, scope, role):
        """Test that explicitly enabled logging behaves like the default."""
        result = LoggingBinding().create_logging_options(scope, role, "S3Destination", logging=True)

        assert result.config.enabled is True

    def test_binders_do_not_share_state(self, stack, role):
        """Test that memoization is per binder instance."""
        LoggingBinding().create_logging_options(Construct(stack, "First"), role, "S3Destination")
        LoggingBinding().create_logging_options(Construct(stack, "Second"), role, "S3Destination")

        Template.from_stack(stack).resource_count_is("AWS::Logs::LogGroup", 2)

    def test_new_scope_gets_its_own_group(self, app, stack, role):
        """Test that binding into a second stack does not reuse the first stack's group."""
        other = cdk.Stack(app, "OtherStack")
        other_role = iam.Role(other, "Role", assumed_by=iam.ServicePrincipal("firehose.amazonaws.com"))
        binding = LoggingBinding()

        binding.create_logging_options(Construct(stack, "Stream"), role, "S3Destination")
        second = binding.create_logging_options(Construct(other, "Stream"), other_role, "S3Destination")

        assert binding.log_group.node.path == "OtherStack/Stream/LogGroup"
        assert second.config.log_group_name == binding.log_group.log_group_name
        Template.from_stack(other).resource_count_is("AWS::Logs::LogGroup", 1)
