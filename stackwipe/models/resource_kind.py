"""Resource kind model.

The fixed set of resource kinds the wipe tool recognizes, with the record
fields each kind is identified, named and sorted by.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

# Sort key for records without a usable timestamp (they sort last).
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class KindInfo:
    """Per-kind record layout.

    Attributes:
        label: Plural human-readable label used in task titles
        service: boto3 service name
        id_field: Record field passed to the deletion call
        name_field: Record field shown to the operator
        timestamp_field: Creation or last-modified field used for sorting
    """

    label: str
    service: str
    id_field: str
    name_field: str
    timestamp_field: str


class ResourceKind(Enum):
    """Resource kinds that can be listed and wiped."""

    LAMBDA_FUNCTION = "lambda"
    LOG_GROUP = "log-group"
    API_GATEWAY = "api-gateway"
    BUCKET = "bucket"
    CLOUDFRONT_DISTRIBUTION = "cloudfront"
    IAM_ROLE = "iam-role"

    @classmethod
    def from_value(cls, value: Any) -> Optional["ResourceKind"]:
        """Return the kind for a value, or None if it names no known kind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def info(self) -> KindInfo:
        return _KIND_INFO[self]

    @property
    def label(self) -> str:
        return self.info.label

    def resource_id(self, record: dict) -> str:
        return str(record.get(self.info.id_field, ""))

    def display_name(self, record: dict) -> str:
        return str(record.get(self.info.name_field) or self.resource_id(record))

    def timestamp(self, record: dict) -> datetime:
        return to_datetime(record.get(self.info.timestamp_field))


_KIND_INFO = {
    ResourceKind.LAMBDA_FUNCTION: KindInfo(
        label="Lambda functions",
        service="lambda",
        id_field="FunctionName",
        name_field="FunctionName",
        timestamp_field="LastModified",
    ),
    ResourceKind.LOG_GROUP: KindInfo(
        label="CloudWatch Log Groups",
        service="logs",
        id_field="logGroupName",
        name_field="logGroupName",
        timestamp_field="creationTime",
    ),
    ResourceKind.API_GATEWAY: KindInfo(
        label="API Gateways",
        service="apigateway",
        id_field="id",
        name_field="name",
        timestamp_field="createdDate",
    ),
    ResourceKind.BUCKET: KindInfo(
        label="buckets",
        service="s3",
        id_field="Name",
        name_field="Name",
        timestamp_field="CreationDate",
    ),
    ResourceKind.CLOUDFRONT_DISTRIBUTION: KindInfo(
        label="CloudFront distributions",
        service="cloudfront",
        id_field="Id",
        name_field="DomainName",
        timestamp_field="LastModifiedTime",
    ),
    ResourceKind.IAM_ROLE: KindInfo(
        label="IAM roles",
        service="iam",
        id_field="RoleName",
        name_field="RoleName",
        timestamp_field="CreateDate",
    ),
}


def to_datetime(value: Any) -> datetime:
    """Normalize a provider timestamp to an aware UTC datetime.

    boto3 returns most timestamps as datetimes, but Lambda's LastModified is an
    ISO-8601 string ("2024-01-15T10:00:00.000+0000") and CloudWatch Logs
    creationTime is epoch milliseconds.

    Args:
        value: datetime, ISO-8601 string, epoch milliseconds or None

    Returns:
        Timezone-aware datetime (EPOCH if the value is missing or unparseable)
    """
    if value is None:
        return EPOCH

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)

    if isinstance(value, str):
        for fmt in ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z"):
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        try:
            return to_datetime(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return EPOCH

    return EPOCH
