"""
tests/core/resources/test_resources_ec2.py - EC2 인스턴스/보안 그룹 어댑터 테스트 (moto)
"""

import boto3
import pytest
from moto import mock_aws

from core.actions import available_actions
from core.context import AppContext
from core.dao.types import BaseResource, RequestContext
from core.exceptions import APICallError, UnsupportedOperationError
from core.resources.ec2 import (
    InstanceDAO,
    InstanceRenderer,
    SecurityGroupDAO,
    SecurityGroupRenderer,
    instance_from_api,
)

REGION = "ap-northeast-2"
IMAGE_ID = "ami-12c6146b"


@pytest.fixture
def ctx():
    with mock_aws():
        yield RequestContext(AppContext(regions=[REGION]))


@pytest.fixture
def ec2(ctx):
    return boto3.client("ec2", region_name=REGION)


def _run_instance(ec2, name: str) -> str:
    response = ec2.run_instances(
        ImageId=IMAGE_ID,
        MinCount=1,
        MaxCount=1,
        InstanceType="t3.micro",
        TagSpecifications=[{"ResourceType": "instance", "Tags": [{"Key": "Name", "Value": name}]}],
    )
    return response["Instances"][0]["InstanceId"]


class TestInstanceDAO:
    """InstanceDAO 테스트"""

    def test_list(self, ctx, ec2):
        """인스턴스 목록 (Name 태그를 이름으로)"""
        instance_id = _run_instance(ec2, "web-1")

        resources = InstanceDAO(ctx).list()

        assert [r.get_id() for r in resources] == [instance_id]
        assert resources[0].get_name() == "web-1"
        assert resources[0].get_tags() == {"Name": "web-1"}

    def test_list_page_clamps_page_size(self, ctx, ec2):
        """MaxResults 는 5~1000 범위로 보정"""
        _run_instance(ec2, "a")
        resources, token = InstanceDAO(ctx).list_page(1)
        assert len(resources) == 1
        assert token == ""

    def test_get(self, ctx, ec2):
        """단건 조회"""
        instance_id = _run_instance(ec2, "web-1")
        resource = InstanceDAO(ctx).get(instance_id)
        assert resource.get_id() == instance_id
        assert resource.raw()["InstanceType"] == "t3.micro"

    def test_get_missing(self, ctx):
        """없는 인스턴스는 APICallError"""
        with pytest.raises(APICallError) as exc_info:
            InstanceDAO(ctx).get("i-0123456789abcdef0")
        assert exc_info.value.error_code == "InvalidInstanceID.NotFound"

    def test_delete_terminates(self, ctx, ec2):
        """삭제는 terminate"""
        instance_id = _run_instance(ec2, "web-1")
        InstanceDAO(ctx).delete(instance_id)
        state = ec2.describe_instances(InstanceIds=[instance_id])["Reservations"][0]["Instances"][0]["State"]["Name"]
        assert state in ("shutting-down", "terminated")

    def test_actions_follow_state(self, ctx, ec2):
        """실행 중: 중지/재부팅/삭제, 중지됨: 시작/삭제"""
        instance_id = _run_instance(ec2, "web-1")
        dao = InstanceDAO(ctx)

        running = [a.name for a in available_actions(dao, dao.get(instance_id))]
        assert running == ["Stop", "Reboot", "Delete"]

        ec2.stop_instances(InstanceIds=[instance_id])
        stopped = [a.name for a in available_actions(dao, dao.get(instance_id))]
        assert stopped == ["Start", "Delete"]
        assert available_actions(dao, dao.get(instance_id), read_only=True) == []

    def test_stop_action(self, ctx, ec2):
        """StopInstances 실행"""
        instance_id = _run_instance(ec2, "web-1")
        InstanceDAO(ctx).run_action("StopInstances", instance_id)
        state = ec2.describe_instances(InstanceIds=[instance_id])["Reservations"][0]["Instances"][0]["State"]["Name"]
        assert state in ("stopping", "stopped")

    def test_unknown_action(self, ctx):
        """정의되지 않은 작업명"""
        with pytest.raises(UnsupportedOperationError):
            InstanceDAO(ctx).run_action("TerminateEverything", "i-0123456789abcdef0")


class TestSecurityGroupDAO:
    """SecurityGroupDAO 테스트"""

    def test_list_and_get(self, ctx, ec2):
        """보안 그룹 목록과 단건 조회"""
        group_id = ec2.create_security_group(GroupName="web-sg", Description="web")["GroupId"]
        dao = SecurityGroupDAO(ctx)

        names = {r.get_name() for r in dao.list()}
        resource = dao.get(group_id)

        assert "web-sg" in names
        assert resource.get_name() == "web-sg"
        assert resource.raw()["Description"] == "web"

    def test_get_missing(self, ctx):
        """없는 보안 그룹"""
        with pytest.raises(APICallError):
            SecurityGroupDAO(ctx).get("sg-0123456789abcdef0")

    def test_delete(self, ctx, ec2):
        """삭제"""
        group_id = ec2.create_security_group(GroupName="tmp-sg", Description="tmp")["GroupId"]
        SecurityGroupDAO(ctx).delete(group_id)
        names = {g["GroupName"] for g in ec2.describe_security_groups()["SecurityGroups"]}
        assert "tmp-sg" not in names


class TestRenderers:
    """EC2 렌더러 테스트"""

    def test_instance_row(self):
        """인스턴스 행"""
        resource = instance_from_api(
            {
                "InstanceId": "i-1",
                "State": {"Name": "running"},
                "InstanceType": "t3.micro",
                "PrivateIpAddress": "10.0.0.1",
                "Placement": {"AvailabilityZone": "ap-northeast-2a"},
                "Tags": [{"Key": "Name", "Value": "web"}],
            }
        )
        row = InstanceRenderer().row(resource)
        assert row[:6] == ["web", "i-1", "running", "t3.micro", "10.0.0.1", "ap-northeast-2a"]

    def test_instance_summary(self):
        """요약 필드의 상태 스타일"""
        resource = BaseResource(id="i-1", data={"InstanceId": "i-1", "State": {"Name": "stopped"}})
        fields = {f.label: f for f in InstanceRenderer().summary_fields(resource)}
        assert fields["State"].style == "yellow"

    def test_security_group_detail_rules(self):
        """인바운드 규칙 요약"""
        resource = BaseResource(
            id="sg-1",
            name="web",
            data={
                "GroupId": "sg-1",
                "IpPermissions": [
                    {"IpProtocol": "tcp", "FromPort": 443, "ToPort": 443, "IpRanges": [{"CidrIp": "0.0.0.0/0"}]}
                ],
                "IpPermissionsEgress": [{"IpProtocol": "-1"}],
            },
        )
        text = SecurityGroupRenderer().detail(resource).plain
        assert "tcp/443 <- 0.0.0.0/0" in text
        assert "-1/all <- -" in text
