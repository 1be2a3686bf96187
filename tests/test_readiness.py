"""Tests for dependent readiness checks."""

import pytest

from reconcile_kernel.errors import ResourceFailedError
from reconcile_kernel.models.objects import (
    Deployment,
    DeploymentCondition,
    DeploymentStatus,
    EndpointAddress,
    Endpoints,
    EndpointSubset,
    Job,
    JobStatus,
    ObjectMeta,
    Resource,
)
from reconcile_kernel.readiness.checks import (
    ReadyMatch,
    is_conditions_ready,
    is_deployment_ready,
    is_endpoints_ready,
    is_job_ready,
    is_service_mesh_control_plane_ready,
    is_service_mesh_member_ready,
    is_service_mesh_member_roll_ready,
)
from reconcile_kernel.readiness.registry import ReadinessRegistry


def _deployment(*conditions: DeploymentCondition) -> Deployment:
    return Deployment(
        metadata=ObjectMeta(name="web", namespace="apps"),
        status=DeploymentStatus(conditions=list(conditions)),
    )


def _job(**counts) -> Job:
    return Job(metadata=ObjectMeta(name="migrate", namespace="apps"), status=JobStatus(**counts))


def _mesh_resource(kind: str, status: dict) -> Resource:
    return Resource(
        api_version="maistra.io/v2",
        kind=kind,
        metadata=ObjectMeta(name="basic", namespace="istio-system"),
        status=status,
    )


ALL_PREDICATES = [
    is_deployment_ready,
    is_endpoints_ready,
    is_job_ready,
    is_service_mesh_control_plane_ready,
    is_service_mesh_member_roll_ready,
    is_service_mesh_member_ready,
]


@pytest.mark.parametrize("predicate", ALL_PREDICATES)
def test_unobserved_resource_is_not_ready(predicate):
    """An unobserved dependent is pending, not failed."""
    assert predicate(None) is False


class TestDeploymentReadiness:
    def test_replica_failure_raises_with_reason(self):
        deployment = _deployment(DeploymentCondition(type="ReplicaFailure", reason="FailedCreate"))
        with pytest.raises(ResourceFailedError, match="FailedCreate"):
            is_deployment_ready(deployment)

    def test_progressing_true_is_ready(self):
        assert is_deployment_ready(_deployment(DeploymentCondition(type="Progressing", status="True")))

    def test_progressing_false_is_not_ready(self):
        assert not is_deployment_ready(_deployment(DeploymentCondition(type="Progressing", status="False")))

    def test_no_conditions_is_ready(self):
        assert is_deployment_ready(_deployment())


class TestEndpointsReadiness:
    def test_ready_with_one_address(self):
        endpoints = Endpoints(
            metadata=ObjectMeta(name="web", namespace="apps"),
            subsets=[
                EndpointSubset(),
                EndpointSubset(addresses=[EndpointAddress(ip="10.0.0.4")]),
            ],
        )
        assert is_endpoints_ready(endpoints)

    def test_not_ready_without_addresses(self):
        endpoints = Endpoints(
            metadata=ObjectMeta(name="web", namespace="apps"),
            subsets=[EndpointSubset(not_ready_addresses=[EndpointAddress(ip="10.0.0.4")])],
        )
        assert not is_endpoints_ready(endpoints)

    def test_not_ready_without_subsets(self):
        assert not is_endpoints_ready(Endpoints(metadata=ObjectMeta(name="web", namespace="apps")))


class TestJobReadiness:
    def test_failed_job_raises(self):
        with pytest.raises(ResourceFailedError, match="apps/migrate"):
            is_job_ready(_job(failed=1))

    def test_active_job_not_ready(self):
        assert not is_job_ready(_job(active=1, succeeded=0))

    def test_pending_job_not_ready(self):
        assert not is_job_ready(_job())

    def test_succeeded_job_ready(self):
        assert is_job_ready(_job(succeeded=1))


class TestConditionsReadiness:
    def test_missing_conditions_raise(self):
        with pytest.raises(ResourceFailedError, match="Status Conditions for ServiceMeshMember is not found"):
            is_service_mesh_member_ready(_mesh_resource("ServiceMeshMember", {}))

    def test_malformed_conditions_raise(self):
        with pytest.raises(ResourceFailedError):
            is_conditions_ready(_mesh_resource("X", {"conditions": "Ready"}), ReadyMatch.STATUS_TRUE)
        with pytest.raises(ResourceFailedError):
            is_conditions_ready(_mesh_resource("X", {"conditions": ["Ready"]}), ReadyMatch.STATUS_TRUE)

    def test_components_ready_matches_reason(self):
        resource = _mesh_resource(
            "ServiceMeshControlPlane",
            {"conditions": [{"type": "Ready", "status": "True", "reason": "ComponentsReady"}]},
        )
        assert is_service_mesh_control_plane_ready(resource)

    def test_components_ready_ignores_status(self):
        resource = _mesh_resource(
            "ServiceMeshControlPlane",
            {"conditions": [{"type": "Ready", "status": "True", "reason": "Installing"}]},
        )
        assert not is_service_mesh_control_plane_ready(resource)

    def test_status_true_match(self):
        ready = _mesh_resource("ServiceMeshMemberRoll", {"conditions": [{"type": "Ready", "status": "True"}]})
        pending = _mesh_resource("ServiceMeshMemberRoll", {"conditions": [{"type": "Ready", "status": "False"}]})
        assert is_service_mesh_member_roll_ready(ready)
        assert not is_service_mesh_member_roll_ready(pending)

    def test_empty_conditions_not_ready(self):
        assert not is_conditions_ready(_mesh_resource("X", {"conditions": []}), ReadyMatch.STATUS_TRUE)


class TestReadinessRegistry:
    def setup_method(self):
        self.registry = ReadinessRegistry()

    def test_default_kinds(self):
        for kind in ("Deployment", "Endpoints", "Job", "ServiceMeshControlPlane",
                     "ServiceMeshMemberRoll", "ServiceMeshMember"):
            assert kind in self.registry

    def test_dispatch_by_kind(self):
        assert self.registry.is_ready("Job", _job(succeeded=1))
        assert not self.registry.is_ready("Job", _job(active=1))

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            self.registry.is_ready("CronJob", None)

    def test_register_conditions_kind(self):
        self.registry.register_conditions("Kafka", ReadyMatch.STATUS_TRUE)
        kafka = _mesh_resource("Kafka", {"conditions": [{"type": "Ready", "status": "True"}]})
        assert self.registry.is_ready("Kafka", kafka)

    def test_register_custom_predicate(self):
        self.registry.register("Secret", lambda resource: resource is not None)
        assert self.registry.is_ready("Secret", _mesh_resource("Secret", {}))

    def test_are_all_ready(self):
        assert self.registry.are_all_ready([("Job", _job(succeeded=1)), ("Deployment", _deployment())])
        assert not self.registry.are_all_ready([("Job", _job(succeeded=1)), ("Deployment", None)])

    def test_are_all_ready_propagates_failure(self):
        with pytest.raises(ResourceFailedError):
            self.registry.are_all_ready([("Job", _job(failed=2))])
