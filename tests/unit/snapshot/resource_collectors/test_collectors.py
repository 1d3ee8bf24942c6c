"""Unit tests for the per-kind collectors."""

from __future__ import annotations

from unittest.mock import MagicMock, Mock, call

import boto3
import pytest
from botocore.stub import Stubber

from stackwipe.models.resource_kind import ResourceKind
from stackwipe.snapshot.resource_collectors import (
    COLLECTORS,
    ApiGatewayCollector,
    CloudFrontCollector,
    IamRoleCollector,
    LambdaCollector,
    LogGroupCollector,
    S3BucketCollector,
)
from stackwipe.snapshot.resource_collectors.iam_collector import is_reserved_role
from tests.fixtures.resources import (
    bucket,
    client_error,
    distribution,
    iam_role,
    lambda_function,
    log_group,
    rest_api,
    stub_paginators,
    utc,
)


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_session(mock_client: MagicMock) -> Mock:
    """Create a mock boto3 session handing out mock_client."""
    session = Mock(spec=boto3.Session)
    session.client.return_value = mock_client
    return session


def stubbed_session(client) -> Mock:
    session = Mock(spec=boto3.Session)
    session.client.return_value = client
    return session


def assert_newest_first(kind: ResourceKind, records: list) -> None:
    stamps = [kind.timestamp(record) for record in records]
    assert stamps == sorted(stamps, reverse=True)


def test_every_kind_has_a_collector() -> None:
    """Test the collector registry covers every kind."""
    assert set(COLLECTORS) == set(ResourceKind)
    for kind, collector_class in COLLECTORS.items():
        assert collector_class.kind is kind


@pytest.mark.parametrize("kind", list(ResourceKind))
def test_client_built_in_configured_region(kind: ResourceKind, mock_session: Mock, mock_client: MagicMock) -> None:
    """Test every collector, global services included, uses the session's region."""
    mock_client.get_paginator.return_value.paginate.side_effect = lambda **kwargs: iter([])

    COLLECTORS[kind](mock_session, "eu-west-1").collect()

    assert mock_session.client.call_args.args == (kind.info.service,)
    assert mock_session.client.call_args.kwargs["region_name"] == "eu-west-1"


class TestLambdaCollector:
    """Tests for LambdaCollector."""

    def test_service_name(self, mock_session: Mock) -> None:
        assert LambdaCollector(mock_session, "us-east-1").service_name == "lambda"

    def test_collects_all_pages_newest_first(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test every page is gathered and ordered by LastModified."""
        paginators = stub_paginators(
            mock_client,
            {
                "list_functions": [
                    {
                        "Functions": [
                            lambda_function("old", "2023-05-01T00:00:00.000+0000"),
                            lambda_function("newest", "2024-06-01T00:00:00.000+0000"),
                        ]
                    },
                    {"Functions": [lambda_function("middle", "2024-01-01T00:00:00.000+0000")]},
                ]
            },
        )

        records = LambdaCollector(mock_session, "us-east-1").collect()

        assert [r["FunctionName"] for r in records] == ["newest", "middle", "old"]
        assert paginators["list_functions"].paginate.call_args == call(PaginationConfig={"PageSize": 10})
        mock_session.client.assert_called_once()
        assert mock_session.client.call_args[0][0] == "lambda"

    def test_follows_next_marker(self) -> None:
        """Test the real paginator sends MaxItems and follows NextMarker."""
        client = boto3.client("lambda", region_name="us-east-1")
        with Stubber(client) as stubber:
            stubber.add_response(
                "list_functions",
                {"Functions": [lambda_function("a", "2024-01-01T00:00:00.000+0000")], "NextMarker": "page-2"},
                {"MaxItems": 10},
            )
            stubber.add_response(
                "list_functions",
                {"Functions": [lambda_function("b", "2024-02-01T00:00:00.000+0000")]},
                {"MaxItems": 10, "Marker": "page-2"},
            )

            records = LambdaCollector(stubbed_session(client), "us-east-1").collect()

            stubber.assert_no_pending_responses()
        assert [r["FunctionName"] for r in records] == ["b", "a"]

    def test_listing_error_propagates(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test listing failures reach the caller."""
        mock_client.get_paginator.return_value.paginate.side_effect = client_error("AccessDeniedException", "denied")

        with pytest.raises(Exception, match="denied"):
            LambdaCollector(mock_session, "us-east-1").collect()


class TestLogGroupCollector:
    """Tests for LogGroupCollector."""

    def test_default_prefix(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test the /aws/ prefix is requested on every page."""
        paginators = stub_paginators(
            mock_client,
            {
                "describe_log_groups": [
                    {"logGroups": [log_group("/aws/lambda/a", 1000)]},
                    {"logGroups": [log_group("/aws/lambda/b", 2000)]},
                ]
            },
        )

        records = LogGroupCollector(mock_session, "us-east-1").collect()

        assert [r["logGroupName"] for r in records] == ["/aws/lambda/b", "/aws/lambda/a"]
        assert paginators["describe_log_groups"].paginate.call_args == call(
            logGroupNamePrefix="/aws/", PaginationConfig={"PageSize": 50}
        )

    def test_no_prefix(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test prefix is omitted when disabled."""
        paginators = stub_paginators(mock_client, {"describe_log_groups": [{"logGroups": []}]})

        assert LogGroupCollector(mock_session, "us-east-1", prefix=None).collect() == []
        assert paginators["describe_log_groups"].paginate.call_args == call(PaginationConfig={"PageSize": 50})


class TestApiGatewayCollector:
    """Tests for ApiGatewayCollector."""

    def test_collects_rest_apis(self, mock_session: Mock, mock_client: MagicMock) -> None:
        paginators = stub_paginators(
            mock_client,
            {
                "get_rest_apis": [
                    {"items": [rest_api("a", "first", utc(2024, 1, 1))]},
                    {"items": [rest_api("b", "second", utc(2024, 2, 1))]},
                ]
            },
        )

        records = ApiGatewayCollector(mock_session, "us-east-1").collect()

        assert [r["id"] for r in records] == ["b", "a"]
        assert paginators["get_rest_apis"].paginate.call_args == call(PaginationConfig={"PageSize": 10})


class TestS3BucketCollector:
    """Tests for S3BucketCollector."""

    def test_collects_buckets(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test every page is gathered and ordered by CreationDate."""
        paginators = stub_paginators(
            mock_client,
            {
                "list_buckets": [
                    {"Buckets": [bucket("b-old", utc(2022, 1, 1))]},
                    {"Buckets": [bucket("b-new", utc(2025, 1, 1))]},
                ]
            },
        )

        records = S3BucketCollector(mock_session, "us-east-1").collect()

        assert [r["Name"] for r in records] == ["b-new", "b-old"]
        assert paginators["list_buckets"].paginate.call_args == call(PaginationConfig={"PageSize": 1000})

    def test_follows_continuation_token(self) -> None:
        """Test the real paginator sends MaxBuckets and follows ContinuationToken."""
        client = boto3.client("s3", region_name="us-east-1")
        with Stubber(client) as stubber:
            stubber.add_response(
                "list_buckets",
                {"Buckets": [bucket("first", utc(2024, 1, 1))], "ContinuationToken": "c1"},
                {"MaxBuckets": 1000},
            )
            stubber.add_response(
                "list_buckets",
                {"Buckets": [bucket("second", utc(2024, 2, 1))]},
                {"MaxBuckets": 1000, "ContinuationToken": "c1"},
            )

            records = S3BucketCollector(stubbed_session(client), "us-east-1").collect()

            stubber.assert_no_pending_responses()
        assert [r["Name"] for r in records] == ["second", "first"]


class TestCloudFrontCollector:
    """Tests for CloudFrontCollector."""

    def test_items_inside_distribution_list(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test items are read from DistributionList.Items."""
        paginators = stub_paginators(
            mock_client,
            {
                "list_distributions": [
                    {"DistributionList": {"Items": [distribution("E1", modified=utc(2024, 1, 1))], "IsTruncated": True}},
                    {"DistributionList": {"Items": [distribution("E2", modified=utc(2024, 3, 1))], "IsTruncated": False}},
                ]
            },
        )

        records = CloudFrontCollector(mock_session, "us-east-1").collect()

        assert [r["Id"] for r in records] == ["E2", "E1"]
        assert paginators["list_distributions"].paginate.call_args == call(PaginationConfig={"PageSize": 20})

    def test_account_without_distributions(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test a DistributionList without Items yields nothing."""
        stub_paginators(
            mock_client,
            {"list_distributions": [{"DistributionList": {"Quantity": 0, "IsTruncated": False, "MaxItems": 20}}]},
        )

        assert CloudFrontCollector(mock_session, "us-east-1").collect() == []


class TestIamRoleCollector:
    """Tests for IamRoleCollector."""

    def test_excludes_reserved_roles(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test AWS-managed roles are never offered for deletion."""
        paginators = stub_paginators(
            mock_client,
            {
                "list_roles": [
                    {
                        "Roles": [
                            iam_role("AWSServiceRoleForECS", utc(2024, 5, 1)),
                            iam_role("app-lambda-role", utc(2024, 1, 1)),
                        ],
                    },
                    {
                        "Roles": [
                            iam_role("OrganizationAccountAccessRole", utc(2024, 6, 1)),
                            iam_role("app-api-role", utc(2024, 2, 1)),
                        ],
                    },
                ]
            },
        )

        records = IamRoleCollector(mock_session, "us-east-1").collect()

        assert [r["RoleName"] for r in records] == ["app-api-role", "app-lambda-role"]
        assert paginators["list_roles"].paginate.call_args == call(PaginationConfig={"PageSize": 100})
        assert_newest_first(ResourceKind.IAM_ROLE, records)

    def test_follows_truncation_marker(self) -> None:
        """Test the real paginator follows IsTruncated/Marker."""
        client = boto3.client("iam", region_name="us-east-1")
        with Stubber(client) as stubber:
            stubber.add_response(
                "list_roles",
                {"Roles": [iam_role("first-role", utc(2024, 1, 1))], "IsTruncated": True, "Marker": "r1"},
                {"MaxItems": 100},
            )
            stubber.add_response(
                "list_roles",
                {"Roles": [iam_role("second-role", utc(2024, 2, 1))], "IsTruncated": False},
                {"MaxItems": 100, "Marker": "r1"},
            )

            records = IamRoleCollector(stubbed_session(client), "us-east-1").collect()

            stubber.assert_no_pending_responses()
        assert [r["RoleName"] for r in records] == ["second-role", "first-role"]

    def test_extra_reserved_prefixes(self, mock_session: Mock, mock_client: MagicMock) -> None:
        """Test configured prefixes are excluded too."""
        stub_paginators(
            mock_client,
            {"list_roles": [{"Roles": [iam_role("cdk-hnb659fds-deploy-role"), iam_role("app-role")]}]},
        )

        collector = IamRoleCollector(mock_session, "us-east-1", extra_reserved_prefixes=["cdk-"])

        assert [r["RoleName"] for r in collector.collect()] == ["app-role"]

    @pytest.mark.parametrize(
        "name,reserved",
        [
            ("AWSServiceRoleForSupport", True),
            ("OrganizationAccountAccessRole", True),
            ("MyAWSServiceRole", False),
            ("app-role", False),
        ],
    )
    def test_is_reserved_role(self, name: str, reserved: bool) -> None:
        assert is_reserved_role(name) is reserved
