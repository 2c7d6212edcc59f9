"""Behaviour shared by owned and imported delivery streams."""

from typing import Any, Optional

from aws_cdk import CfnMapping, Fn, Resource, Stack, Token, aws_ec2 as ec2, aws_iam as iam
from aws_cdk.region_info import RegionInfo
from constructs import Construct

from deliveryflow.logging import get_logger
from deliveryflow.types.base import DFBaseModel

logger = get_logger(__name__)

WRITE_ACTIONS = ["firehose:PutRecord", "firehose:PutRecordBatch"]
CIDR_MAPPING_ID = "FirehoseCidrMapping"
CIDR_MAPPING_KEY = "FirehoseCidrBlock"


class DeliveryStreamAttributes(DFBaseModel):
    """Attributes of an existing delivery stream.

    At least one of ``delivery_stream_name`` and ``delivery_stream_arn``
    must be provided; the other is derived from it.

    Attributes:
        delivery_stream_arn: ARN of the delivery stream
        delivery_stream_name: Name of the delivery stream
        role: ``aws_iam.IRole`` the delivery stream assumes. Without it the
            imported stream cannot receive grants.
    """

    delivery_stream_arn: Optional[str] = None
    delivery_stream_name: Optional[str] = None
    role: Optional[Any] = None


def firehose_connections(scope: Construct) -> ec2.Connections:
    """Network peer covering the service's addresses in the stack's region.

    The CIDR block is looked up from region info when the region is known
    at synthesis time. Otherwise a ``FirehoseCidrMapping`` of every region
    is added to the stack once and the block is selected at deploy time.
    """
    stack = Stack.of(scope)
    region = stack.region
    cidr_block = None
    if not Token.is_unresolved(region):
        cidr_block = RegionInfo.get(region).firehose_cidr_block
    if cidr_block is None:
        mapping = stack.node.try_find_child(CIDR_MAPPING_ID) or CfnMapping(
            stack,
            CIDR_MAPPING_ID,
            mapping={
                info.name: {CIDR_MAPPING_KEY: info.firehose_cidr_block}
                for info in RegionInfo.regions
                if info.firehose_cidr_block
            },
        )
        cidr_block = Fn.find_in_map(mapping.logical_id, region, CIDR_MAPPING_KEY)
    return ec2.Connections(peer=ec2.Peer.ipv4(cidr_block))


class DeliveryStreamBase(Resource):
    """A delivery stream that can be granted access to and connected to.

    Subclasses set ``_delivery_stream_arn``, ``_delivery_stream_name`` and
    ``_grant_principal``.
    """

    def __init__(self, scope: Construct, id: str, **kwargs: Any):
        super().__init__(scope, id, **kwargs)
        self._connections = firehose_connections(self)
        self._delivery_stream_arn: Optional[str] = None
        self._delivery_stream_name: Optional[str] = None
        self._grant_principal: Optional[iam.IPrincipal] = None

    @property
    def delivery_stream_arn(self) -> str:
        return self._delivery_stream_arn

    @property
    def delivery_stream_name(self) -> str:
        return self._delivery_stream_name

    @property
    def grant_principal(self) -> iam.IPrincipal:
        """The principal the service acts as."""
        return self._grant_principal

    @property
    def connections(self) -> ec2.Connections:
        """Network connections of the service, used to open ingress on destinations."""
        return self._connections

    def grant(self, grantee: iam.IGrantable, *actions: str) -> iam.Grant:
        """Grant ``grantee`` permission to perform ``actions`` on this stream."""
        grant = iam.Grant.add_to_principal(
            grantee=grantee,
            actions=list(actions),
            resource_arns=[self.delivery_stream_arn],
        )
        if not grant.success:
            logger.warning(
                "Grant was not added to the principal's policy",
                extra={"path": self.node.path, "actions": list(actions)},
            )
        return grant

    def grant_write(self, grantee: iam.IGrantable) -> iam.Grant:
        """Grant ``grantee`` permission to put records into this stream."""
        return self.grant(grantee, *WRITE_ACTIONS)


class _ImportedDeliveryStream(DeliveryStreamBase):
    """Reference to a delivery stream defined elsewhere.

    Without a role, grants go to an unknown principal and are dropped.
    """

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        delivery_stream_name: str,
        delivery_stream_arn: str,
        role: Optional[iam.IRole] = None,
    ):
        super().__init__(scope, id)
        self._delivery_stream_name = delivery_stream_name
        self._delivery_stream_arn = delivery_stream_arn
        self._grant_principal = role or iam.UnknownPrincipal(resource=self)
