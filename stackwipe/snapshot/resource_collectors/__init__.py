"""Per-kind resource collectors."""

from __future__ import annotations

from ...models.resource_kind import ResourceKind
from .apigateway_collector import ApiGatewayCollector
from .base import BaseResourceCollector
from .cloudfront_collector import CloudFrontCollector
from .iam_collector import IamRoleCollector
from .lambda_collector import LambdaCollector
from .logs_collector import LogGroupCollector
from .s3_collector import S3BucketCollector

COLLECTORS: dict[ResourceKind, type[BaseResourceCollector]] = {
    ResourceKind.LAMBDA_FUNCTION: LambdaCollector,
    ResourceKind.LOG_GROUP: LogGroupCollector,
    ResourceKind.API_GATEWAY: ApiGatewayCollector,
    ResourceKind.BUCKET: S3BucketCollector,
    ResourceKind.CLOUDFRONT_DISTRIBUTION: CloudFrontCollector,
    ResourceKind.IAM_ROLE: IamRoleCollector,
}

__all__ = [
    "COLLECTORS",
    "ApiGatewayCollector",
    "BaseResourceCollector",
    "CloudFrontCollector",
    "IamRoleCollector",
    "LambdaCollector",
    "LogGroupCollector",
    "S3BucketCollector",
]
