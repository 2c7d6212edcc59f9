"""Numeric bounds enforced by the delivery stream service."""

BUFFERING_INTERVAL_MIN_SECONDS = 60
BUFFERING_INTERVAL_MAX_SECONDS = 900

BUFFERING_SIZE_MIN_MIB = 1
BUFFERING_SIZE_MAX_MIB = 128

ELASTICSEARCH_RETRY_MAX_SECONDS = 7200
REDSHIFT_RETRY_MAX_SECONDS = 7200
