"""Encryption of data delivered to S3."""

from typing import Any, Optional

from aws_cdk import aws_kinesisfirehose as firehose, aws_kms as kms

from deliveryflow.destinations.result import BindingResult

NO_ENCRYPTION = "NoEncryption"


def create_encryption_config(principal: Any, encryption_key: Optional[kms.IKey] = None) -> BindingResult:
    """Encrypt with ``encryption_key`` when given, otherwise disable encryption.

    The principal is granted encrypt/decrypt on the key.
    """
    if encryption_key is None:
        return BindingResult(
            config=firehose.CfnDeliveryStream.EncryptionConfigurationProperty(no_encryption_config=NO_ENCRYPTION),
        )

    grant = encryption_key.grant_encrypt_decrypt(principal)
    config = firehose.CfnDeliveryStream.EncryptionConfigurationProperty(
        kms_encryption_config=firehose.CfnDeliveryStream.KMSEncryptionConfigProperty(
            awskms_key_arn=encryption_key.key_arn,
        ),
    )
    return BindingResult(config=config, dependables=[grant])
