"""AWS resource deletion protocols.

Maps each resource kind to the procedure that deletes one of its resources,
including the unwinding AWS requires first (emptying buckets, clearing role
policies, disabling distributions).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..aws.client import DEFAULT_BOTO_CONFIG, SINGLE_ATTEMPT_BOTO_CONFIG, create_boto_client
from ..models.deletion_record import DeletionStatus
from ..models.resource_kind import ResourceKind
from ..snapshot.resource_collectors.pagination import PageSpec, drain_pages, iter_pages
from .retry import DEFAULT_BACKOFF_FACTOR, DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS, call_with_retry

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

Notify = Callable[[str], None]


class DeletionError(Exception):
    """A prerequisite for deletion could not be completed."""


def _contents(page: dict) -> list:
    return page.get("Contents", [])


def _ignore(message: str) -> None:
    pass


class ResourceDeleter:
    """AWS resource deletion orchestrator.

    Each protocol deletes one record and reports its sub-steps through the
    notify callback. Errors propagate to the caller; only API Gateway
    deletion is retried, and only when throttled.
    """

    # Deletion protocol mapping: kind -> method name
    DELETION_PROTOCOLS = {
        ResourceKind.LAMBDA_FUNCTION: "_delete_lambda_function",
        ResourceKind.LOG_GROUP: "_delete_log_group",
        ResourceKind.API_GATEWAY: "_delete_rest_api",
        ResourceKind.BUCKET: "_delete_bucket",
        ResourceKind.CLOUDFRONT_DISTRIBUTION: "_delete_distribution",
        ResourceKind.IAM_ROLE: "_delete_role",
    }

    # Services whose calls go through call_with_retry; botocore must not
    # retry them a second time underneath.
    SELF_RETRIED_SERVICES = frozenset({"apigateway"})

    def __init__(
        self,
        aws_profile: Optional[str] = None,
        region: str = DEFAULT_REGION,
        retry_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_INITIAL_DELAY,
        retry_factor: float = DEFAULT_BACKOFF_FACTOR,
    ) -> None:
        """Initialize resource deleter.

        Args:
            aws_profile: AWS profile name (optional)
            region: AWS region for regional services
            retry_attempts: Total attempts for throttled calls (default: 3)
            retry_delay: Seconds before the first retry (default: 60)
            retry_factor: Backoff multiplier between retries (default: 2)
        """
        self.aws_profile = aws_profile
        self.region = region
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.retry_factor = retry_factor
        self._clients: dict[str, Any] = {}

    def _client(self, service: str) -> Any:
        if service not in self._clients:
            self._clients[service] = create_boto_client(
                service_name=service,
                region_name=self.region,
                profile_name=self.aws_profile,
                config=SINGLE_ATTEMPT_BOTO_CONFIG if service in self.SELF_RETRIED_SERVICES else DEFAULT_BOTO_CONFIG,
            )
        return self._clients[service]

    def delete(self, kind: ResourceKind, record: dict, notify: Optional[Notify] = None) -> DeletionStatus:
        """Delete one resource with its kind's protocol.

        Args:
            kind: Resource kind of the record
            record: Resource record as listed
            notify: Progress callback for sub-steps (optional)

        Returns:
            DELETED, or DISABLED for a distribution that still needs a second run
        """
        protocol = getattr(self, self.DELETION_PROTOCOLS[kind])
        return protocol(record, notify or _ignore)

    def _delete_lambda_function(self, record: dict, notify: Notify) -> DeletionStatus:
        function_name = record["FunctionName"]
        notify(f"Deleting {function_name}...")
        self._client("lambda").delete_function(FunctionName=function_name)
        logger.info(f"Deleted Lambda function {function_name}")
        return DeletionStatus.DELETED

    def _delete_log_group(self, record: dict, notify: Notify) -> DeletionStatus:
        log_group_name = record["logGroupName"]
        notify(f"Deleting {log_group_name}...")
        self._client("logs").delete_log_group(logGroupName=log_group_name)
        logger.info(f"Deleted log group {log_group_name}")
        return DeletionStatus.DELETED

    def _delete_rest_api(self, record: dict, notify: Notify) -> DeletionStatus:
        rest_api_id = record["id"]
        notify(f"Deleting {record.get('name') or rest_api_id}...")

        # DeleteRestApi is limited to one request every 30 seconds per account.
        apigateway = self._client("apigateway")
        call_with_retry(
            lambda: apigateway.delete_rest_api(restApiId=rest_api_id),
            notify=notify,
            max_attempts=self.retry_attempts,
            initial_delay=self.retry_delay,
            factor=self.retry_factor,
        )
        logger.info(f"Deleted REST API {rest_api_id}")
        return DeletionStatus.DELETED

    def _delete_bucket(self, record: dict, notify: Notify) -> DeletionStatus:
        bucket = record["Name"]
        s3 = self._client("s3")

        # Each page is deleted before the next is requested.
        pages = iter_pages(s3, PageSpec(operation="list_objects_v2", items=_contents, params={"Bucket": bucket}))
        notify(f"Emptying {bucket}...")
        for page in pages:
            contents = _contents(page)
            if not contents:
                break

            response = s3.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": obj["Key"]} for obj in contents], "Quiet": True},
            )
            errors = response.get("Errors", [])
            if errors:
                first = errors[0]
                raise DeletionError(
                    f"Could not empty {bucket}: {len(errors)} object(s) not deleted "
                    f"({first.get('Key')}: {first.get('Code')} {first.get('Message')})"
                )

        notify(f"Deleting {bucket}...")
        s3.delete_bucket(Bucket=bucket)
        logger.info(f"Deleted bucket {bucket}")
        return DeletionStatus.DELETED

    def _delete_role(self, record: dict, notify: Notify) -> DeletionStatus:
        role_name = record["RoleName"]
        iam = self._client("iam")
        notify(f"Deleting {role_name}...")

        inline_policies = drain_pages(
            iam,
            PageSpec(
                operation="list_role_policies",
                items=lambda page: page.get("PolicyNames", []),
                params={"RoleName": role_name},
            ),
        )
        for policy_name in inline_policies:
            logger.debug(f"Deleting inline policy {policy_name} from {role_name}")
            iam.delete_role_policy(RoleName=role_name, PolicyName=policy_name)

        attached_policies = drain_pages(
            iam,
            PageSpec(
                operation="list_attached_role_policies",
                items=lambda page: page.get("AttachedPolicies", []),
                params={"RoleName": role_name},
            ),
            key=lambda policy: policy["PolicyArn"],
        )
        for policy in attached_policies:
            logger.debug(f"Detaching {policy['PolicyArn']} from {role_name}")
            iam.detach_role_policy(RoleName=role_name, PolicyArn=policy["PolicyArn"])

        iam.delete_role(RoleName=role_name)
        logger.info(f"Deleted IAM role {role_name}")
        return DeletionStatus.DELETED

    def _delete_distribution(self, record: dict, notify: Notify) -> DeletionStatus:
        distribution_id = record["Id"]
        domain_name = record.get("DomainName") or distribution_id
        cloudfront = self._client("cloudfront")

        notify(f"Fetching {domain_name} configuration...")
        response = cloudfront.get_distribution_config(Id=distribution_id)
        etag = response["ETag"]
        config = response["DistributionConfig"]

        # Enabled distributions cannot be deleted, and disabling takes minutes
        # to propagate. Disable now; a later run finds Enabled=False and deletes.
        if config.get("Enabled"):
            notify(f"Disabling {domain_name}...")
            cloudfront.update_distribution(
                Id=distribution_id,
                DistributionConfig={**config, "Enabled": False},
                IfMatch=etag,
            )
            notify(f"{domain_name} disabled. Run again once the change has propagated to delete it.")
            logger.info(f"Disabled CloudFront distribution {distribution_id}")
            return DeletionStatus.DISABLED

        notify(f"Deleting {domain_name}...")
        cloudfront.delete_distribution(Id=distribution_id, IfMatch=etag)
        logger.info(f"Deleted CloudFront distribution {distribution_id}")
        return DeletionStatus.DELETED


_missing_protocols = set(ResourceKind) - set(ResourceDeleter.DELETION_PROTOCOLS)
if _missing_protocols:
    raise RuntimeError(f"No deletion protocol for: {sorted(k.value for k in _missing_protocols)}")
