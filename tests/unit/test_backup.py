"""Tests for backup resolution and configuration."""

import pytest
from aws_cdk import Duration, aws_kms as kms, aws_s3 as s3
from constructs import Construct

from deliveryflow.common.exceptions import ConfigurationError, ErrorCode
from deliveryflow.constants import BackupMode, Compression, DestinationKind
from deliveryflow.destinations.backup import (
    ResolvedBackup,
    create_backup_config,
    resolve_backup,
    validate_backup_mode,
)
from deliveryflow.destinations.logging_options import LoggingBinding
from deliveryflow.destinations.props import DestinationS3BackupProps


@pytest.fixture
def scope(stack):
    return Construct(stack, "Destination")


class TestResolveBackup:
    """Test backup mode resolution."""

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (DestinationKind.S3, BackupMode.DISABLED),
            (DestinationKind.REDSHIFT, BackupMode.DISABLED),
            (DestinationKind.ELASTICSEARCH, BackupMode.FAILED_ONLY),
        ],
    )
    def test_default_mode(self, kind, expected):
        """Test the per-kind default when nothing is given."""
        assert resolve_backup(kind).mode == expected

    def test_bucket_implies_all(self, stack):
        """Test that a bucket without a mode backs up everything."""
        props = DestinationS3BackupProps(bucket=s3.Bucket(stack, "Backup"))

        resolved = resolve_backup(DestinationKind.S3, props)

        assert resolved.mode == BackupMode.ALL
        assert resolved.active
        assert resolved.props is props

    def test_explicit_mode_wins(self):
        """Test that an explicit mode is kept."""
        props = DestinationS3BackupProps(mode=BackupMode.ALL)

        assert resolve_backup(DestinationKind.S3, props).mode == BackupMode.ALL

    def test_disabled_with_bucket(self, stack):
        """Test that disabling backup contradicts a provided bucket."""
        props = DestinationS3BackupProps(mode=BackupMode.DISABLED, bucket=s3.Bucket(stack, "Backup"))

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_backup(DestinationKind.S3, props)

        assert exc_info.value.message == "Destination backup cannot be set to DISABLED when bucket is provided"
        assert exc_info.value.error_code == ErrorCode.CONFIG_CONTRADICTION

    def test_disabled_is_inactive(self):
        """Test the active flag of a disabled backup."""
        assert not resolve_backup(DestinationKind.S3).active


class TestValidateBackupMode:
    """Test per-kind backup mode acceptance."""

    def test_s3_rejects_failed_only(self):
        """Test that S3 cannot back up failed records only."""
        backup = resolve_backup(DestinationKind.S3, DestinationS3BackupProps(mode=BackupMode.FAILED_ONLY))

        with pytest.raises(ConfigurationError) as exc_info:
            validate_backup_mode(DestinationKind.S3, "S3", backup)

        assert exc_info.value.message == (
            "S3 destination only supports ALL and DISABLED backup modes, given FAILED_ONLY"
        )

    def test_elasticsearch_rejects_disabled(self):
        """Test that Elasticsearch always keeps a backup."""
        backup = resolve_backup(
            DestinationKind.ELASTICSEARCH,
            DestinationS3BackupProps(mode=BackupMode.DISABLED),
        )

        with pytest.raises(ConfigurationError) as exc_info:
            validate_backup_mode(DestinationKind.ELASTICSEARCH, "Elasticsearch", backup)

        assert exc_info.value.message == (
            "Elasticsearch destination only supports ALL and FAILED_ONLY backup modes, given DISABLED"
        )

    def test_supported_mode_passes(self):
        """Test that supported modes are accepted."""
        backup = resolve_backup(DestinationKind.REDSHIFT, DestinationS3BackupProps(mode=BackupMode.ALL))

        validate_backup_mode(DestinationKind.REDSHIFT, "Redshift", backup)


class TestCreateBackupConfig:
    """Test the backup S3 configuration."""

    def test_inactive(self, stack, scope, role):
        """Test that a disabled backup creates nothing."""
        backup = ResolvedBackup(mode=BackupMode.DISABLED, props=DestinationS3BackupProps())

        assert create_backup_config(scope, role, backup, LoggingBinding()) is None
        assert scope.node.children == []

    def test_creates_bucket(self, stack, scope, role):
        """Test that an active backup without a bucket creates one."""
        backup = resolve_backup(DestinationKind.S3, DestinationS3BackupProps(mode=BackupMode.ALL))
        logging = LoggingBinding()

        result = create_backup_config(scope, role, backup, logging)

        bucket = scope.node.try_find_child("BackupBucket")
        assert isinstance(bucket, s3.Bucket)
        config = result.config
        assert config.bucket_arn == bucket.bucket_arn
        assert config.role_arn == role.role_arn
        assert config.encryption_configuration.no_encryption_config == "NoEncryption"
        assert config.cloud_watch_logging_options.enabled is True
        assert logging.log_group.node.try_find_child("S3Backup") is not None
        assert config.buffering_hints is None
        assert len(result.dependables) == 2

    def test_provided_bucket_and_settings(self, stack, scope, role):
        """Test that the backup props are carried into the configuration."""
        bucket = s3.Bucket.from_bucket_arn(stack, "Archive", "arn:aws:s3:::archive")
        key = kms.Key(stack, "Key")
        backup = resolve_backup(
            DestinationKind.S3,
            DestinationS3BackupProps(
                bucket=bucket,
                compression=Compression.GZIP,
                encryption_key=key,
                buffering_interval=Duration.minutes(1),
                data_output_prefix="backup/",
                error_output_prefix="failed/",
                logging=False,
            ),
        )

        result = create_backup_config(scope, role, backup, LoggingBinding())

        config = result.config
        assert config.bucket_arn == "arn:aws:s3:::archive"
        assert config.role_arn == role.role_arn
        assert config.buffering_hints.interval_in_seconds == 60
        assert config.compression_format == "GZIP"
        assert config.encryption_configuration.kms_encryption_config.awskms_key_arn == key.key_arn
        assert config.error_output_prefix == "failed/"
        assert config.prefix == "backup/"
        assert config.cloud_watch_logging_options is None
        assert scope.node.try_find_child("BackupBucket") is None
        assert len(result.dependables) == 2
