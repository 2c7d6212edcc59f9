"""Amazon Redshift cluster destination.

Records are staged in an intermediate S3 bucket and loaded with a COPY
command. The cluster reads the bucket through a role attached to it, and
records are inserted as a dedicated user whose password lives in a secret.

The cluster must be reachable by the service, which is only verifiable for
clusters defined in the app: their ``CfnCluster`` and subnet group are
inspected in the construct tree.
"""

from typing import Any, List, Optional

from aws_cdk import (
    Duration,
    SecretValue,
    Stack,
    Token,
    aws_ec2 as ec2,
    aws_iam as iam,
    aws_kinesisfirehose as firehose,
    aws_redshift as redshift_cfn,
    aws_s3 as s3,
)
from aws_cdk import aws_redshift_alpha as redshift
from constructs import Construct
from pydantic import Field

from deliveryflow.common.exceptions import (
    domain_validation_error,
    range_error,
    unresolved_reference_error,
)
from deliveryflow.constants import Compression, DestinationKind, limits
from deliveryflow.destinations.base import DestinationBinder, DestinationBindOptions, DestinationConfig
from deliveryflow.destinations.props import DestinationBufferingProps, DestinationProps
from deliveryflow.destinations.result import split_result
from deliveryflow.logging import get_logger
from deliveryflow.settings import get_settings
from deliveryflow.types.base import DFBaseModel

logger = get_logger(__name__)

UNSUPPORTED_COMPRESSION = (Compression.SNAPPY, Compression.ZIP)
INGRESS_DESCRIPTION = "Allow incoming connections from Kinesis Data Firehose"


class RedshiftUser(DFBaseModel):
    """The cluster user records are inserted as.

    Attributes:
        username: User with INSERT permission on the table
        password: The user's password. The user is created with a generated
            password stored in a secret when omitted.
        encryption_key: ``aws_kms.IKey`` encrypting the generated secret
    """

    username: str = Field(..., min_length=1)
    password: Optional[SecretValue] = None
    encryption_key: Optional[Any] = None


class RedshiftDestinationProps(DestinationProps, DestinationBufferingProps):
    """Properties of a Redshift destination.

    Attributes:
        user: User records are inserted as
        database: Database holding the table
        table_name: Table records are inserted into
        table_columns: Columns the source fields are loaded into
        master_secret: ``aws_secretsmanager.ISecret`` with administrator
            credentials used to create the user and the table. Defaults to
            the cluster's generated secret.
        copy_options: Extra parameters of the COPY command
        retry_timeout: How long delivery is retried, at most 7200 seconds
        intermediate_bucket: ``aws_s3.IBucket`` data is staged in. Created
            when omitted.
        bucket_access_role: ``aws_iam.IRole`` the cluster uses to read the
            intermediate bucket. It must already be attached to the cluster.
            Created and attached when omitted.
        compression: Compression of the staged data; Snappy and ZIP are
            not supported by COPY
    """

    user: RedshiftUser
    database: str
    table_name: str
    table_columns: List[redshift.Column]
    master_secret: Optional[Any] = None
    copy_options: Optional[str] = None
    retry_timeout: Optional[Duration] = None
    intermediate_bucket: Optional[Any] = None
    bucket_access_role: Optional[Any] = None
    compression: Optional[Compression] = None


def _cluster_resource(cluster: redshift.ICluster) -> Optional[redshift_cfn.CfnCluster]:
    """The ``CfnCluster`` behind a cluster defined in the app, None for imports."""
    child = cluster.node.default_child
    return child if isinstance(child, redshift_cfn.CfnCluster) else None


def _in_public_subnet(resource: redshift_cfn.CfnCluster) -> bool:
    """Whether the cluster's subnet group contains a public subnet of the stack."""
    stack = Stack.of(resource)
    group_ref = stack.resolve(resource.cluster_subnet_group_name)
    subnet_ids: List[Any] = []
    public_subnet_ids: List[Any] = []
    for construct in stack.node.find_all():
        if isinstance(construct, redshift_cfn.CfnClusterSubnetGroup) and stack.resolve(construct.ref) == group_ref:
            subnet_ids = stack.resolve(construct.subnet_ids)
        elif isinstance(construct, ec2.PublicSubnet):
            public_subnet_ids.append(stack.resolve(construct.subnet_id))
    return any(subnet_id in public_subnet_ids for subnet_id in subnet_ids)


class RedshiftDestination(DestinationBinder):
    """Deliver records to a Redshift cluster.

    Args:
        cluster: The destination ``aws_redshift_alpha.Cluster``. It must be
            publicly accessible and placed in a public subnet.
        **props: Fields of ``RedshiftDestinationProps``

    Attributes:
        user: The user created by bind when no password is given
    """

    kind = DestinationKind.REDSHIFT
    display_name = "Redshift"
    props_class = RedshiftDestinationProps
    property_name = "redshift_destination_configuration"

    def __init__(self, cluster: redshift.ICluster, **props: Any):
        super().__init__(**props)
        self.cluster = cluster
        self.user: Optional[redshift.User] = None

        resource = _cluster_resource(cluster)
        if resource is None or resource.publicly_accessible is not True:
            raise domain_validation_error(
                "Redshift cluster used as delivery stream destination must be publicly accessible",
                field="cluster",
                value=cluster.node.path,
            )
        if not _in_public_subnet(resource):
            raise domain_validation_error(
                "Redshift cluster used as delivery stream destination must be located in a public subnet",
                field="cluster",
                value=cluster.node.path,
            )

        master_secret = self.props.master_secret or cluster.secret
        if master_secret is None:
            raise unresolved_reference_error(
                "Master secret must be provided or Redshift cluster must generate a master secret",
                reference="master_secret",
            )
        self.master_secret = master_secret

        if self.props.retry_timeout is not None:
            seconds = self.props.retry_timeout.to_seconds()
            if seconds > limits.REDSHIFT_RETRY_MAX_SECONDS:
                raise range_error(
                    f"Retry timeout must be between 0 and {limits.REDSHIFT_RETRY_MAX_SECONDS} seconds. "
                    f"Retry timeout provided was {seconds} seconds.",
                    field="retry_timeout",
                    value=seconds,
                    minimum=0,
                    maximum=limits.REDSHIFT_RETRY_MAX_SECONDS,
                )

        if self.props.compression in UNSUPPORTED_COMPRESSION:
            raise domain_validation_error(
                f"Compression must not be Snappy or ZIP for Redshift destinations, given {self.props.compression}",
                field="compression",
                value=self.props.compression,
            )

    def bind(self, scope: Construct, options: DestinationBindOptions) -> DestinationConfig:
        principal = options.delivery_stream.grant_principal
        props = self.props
        endpoint = self.cluster.cluster_endpoint
        jdbc_url = f"jdbc:redshift://{endpoint.hostname}:{Token.as_string(endpoint.port)}/{props.database}"

        self.cluster.connections.allow_default_port_from(options.delivery_stream.connections, INGRESS_DESCRIPTION)

        table = redshift.Table(
            scope,
            "RedshiftTable",
            cluster=self.cluster,
            admin_user=self.master_secret,
            database_name=props.database,
            table_name=props.table_name,
            table_columns=props.table_columns,
        )
        username, password, user_dependables = self._resolve_user(scope, table)

        intermediate_bucket = props.intermediate_bucket
        if intermediate_bucket is None:
            intermediate_bucket = s3.Bucket(scope, "IntermediateBucket")
        bucket_grant = intermediate_bucket.grant_read_write(principal)

        intermediate_logging, intermediate_logging_dependables = split_result(
            self._create_logging_options(scope, principal, "IntermediateS3")
        )
        intermediate_config = firehose.CfnDeliveryStream.S3DestinationConfigurationProperty(
            bucket_arn=intermediate_bucket.bucket_arn,
            role_arn=principal.role_arn,
            buffering_hints=self._create_buffering_hints(props.buffering_interval, props.buffering_size),
            cloud_watch_logging_options=intermediate_logging,
            compression_format=props.compression or Compression.UNCOMPRESSED.value,
        )

        bucket_access_role = props.bucket_access_role
        if bucket_access_role is None:
            bucket_access_role = iam.Role(
                scope,
                "IntermediateBucketAccessRole",
                assumed_by=iam.ServicePrincipal(get_settings().redshift_service_principal),
            )
            self.cluster.add_iam_role(bucket_access_role)
            logger.debug(
                "Attached bucket access role to cluster",
                extra={"cluster": self.cluster.node.path, "role": bucket_access_role.node.path},
            )
        access_grant = intermediate_bucket.grant_read(bucket_access_role)

        logging_options, logging_dependables = split_result(
            self._create_logging_options(scope, principal, "Redshift")
        )
        processing, processing_dependables = split_result(self._create_processing_config(principal))
        backup, backup_dependables = split_result(self._create_backup_config(scope, principal))

        retry_options = None
        if props.retry_timeout is not None:
            retry_options = firehose.CfnDeliveryStream.RedshiftRetryOptionsProperty(
                duration_in_seconds=props.retry_timeout.to_seconds(),
            )

        configuration = firehose.CfnDeliveryStream.RedshiftDestinationConfigurationProperty(
            cluster_jdbcurl=jdbc_url,
            copy_command=firehose.CfnDeliveryStream.CopyCommandProperty(
                data_table_name=props.table_name,
                data_table_columns=",".join(column.name for column in props.table_columns),
                copy_options=props.copy_options,
            ),
            password=password,
            username=username,
            s3_configuration=intermediate_config,
            role_arn=principal.role_arn,
            cloud_watch_logging_options=logging_options,
            processing_configuration=processing,
            retry_options=retry_options,
            s3_backup_configuration=backup,
            s3_backup_mode="Enabled" if self.backup.active else "Disabled",
        )
        return self._destination_config(
            self.property_name,
            configuration,
            [
                table,
                *user_dependables,
                bucket_grant,
                *intermediate_logging_dependables,
                access_grant,
                *logging_dependables,
                *processing_dependables,
                *backup_dependables,
            ],
        )

    def _resolve_user(self, scope: Construct, table: redshift.Table):
        """Return the username, the password and the constructs creating them."""
        user = self.props.user
        if user.password is not None:
            return user.username, user.password.unsafe_unwrap(), []

        self.user = redshift.User(
            scope,
            "RedshiftUser",
            cluster=self.cluster,
            admin_user=self.master_secret,
            database_name=self.props.database,
            username=user.username,
            encryption_key=user.encryption_key,
        )
        table.grant(self.user, redshift.TableAction.INSERT)
        return self.user.username, self.user.password.unsafe_unwrap(), [self.user]
