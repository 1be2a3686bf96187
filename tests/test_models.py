"""Tests for core data models."""

from datetime import timedelta

from reconcile_kernel.models import (
    APIResource,
    APIResourceList,
    CommonStatus,
    Condition,
    ConditionStatus,
    DetectConfig,
    GroupVersionKind,
    ManagedResource,
    ObjectMeta,
    ObjectReference,
    ReconcileResult,
    ReconcilerConfig,
    StatusReason,
)
from reconcile_kernel.models.status import (
    find_status_condition,
    is_status_condition_true,
    remove_status_condition,
    set_object_reference,
    remove_object_reference,
    set_status_condition,
)


def _condition(status: ConditionStatus, reason: StatusReason, message: str = "") -> Condition:
    return Condition(type="Available", status=status, reason=reason, message=message)


class TestConditions:
    def test_set_appends_new_condition(self):
        conditions = []
        set_status_condition(conditions, _condition(ConditionStatus.TRUE, StatusReason.RECONCILING))

        assert len(conditions) == 1
        assert conditions[0].last_transition_time is not None
        assert conditions[0].last_heartbeat_time is not None

    def test_set_is_upsert_by_type(self):
        """Setting the same type twice must never duplicate the entry."""
        conditions = []
        set_status_condition(conditions, _condition(ConditionStatus.FALSE, StatusReason.FAILING, "boom"))
        set_status_condition(conditions, _condition(ConditionStatus.TRUE, StatusReason.RECONCILING, "ok"))

        assert len(conditions) == 1
        assert conditions[0].status == ConditionStatus.TRUE
        assert conditions[0].reason == StatusReason.RECONCILING
        assert conditions[0].message == "ok"

    def test_transition_time_kept_when_status_unchanged(self):
        conditions = []
        set_status_condition(conditions, _condition(ConditionStatus.FALSE, StatusReason.FAILING, "first"))
        first_transition = conditions[0].last_transition_time

        set_status_condition(conditions, _condition(ConditionStatus.FALSE, StatusReason.INITIALIZING, "second"))

        assert conditions[0].last_transition_time == first_transition
        assert conditions[0].reason == StatusReason.INITIALIZING
        assert conditions[0].message == "second"

    def test_different_types_are_kept_in_order(self):
        conditions = []
        set_status_condition(conditions, _condition(ConditionStatus.TRUE, StatusReason.RECONCILING))
        set_status_condition(
            conditions,
            Condition(type="Degraded", status=ConditionStatus.FALSE, reason=StatusReason.RECONCILING),
        )

        assert [c.type for c in conditions] == ["Available", "Degraded"]
        assert is_status_condition_true(conditions, "Available")
        assert not is_status_condition_true(conditions, "Degraded")

    def test_remove_condition(self):
        conditions = []
        set_status_condition(conditions, _condition(ConditionStatus.TRUE, StatusReason.RECONCILING))
        remove_status_condition(conditions, "Available")

        assert conditions == []
        assert find_status_condition(conditions, "Available") is None


class TestRelatedObjects:
    def test_set_object_reference_upserts(self):
        objects = []
        ref = ObjectReference(api_version="apps/v1", kind="Deployment", name="web", namespace="ns", uid="1")
        set_object_reference(objects, ref)
        set_object_reference(objects, ref.model_copy(update={"uid": "2"}))

        assert len(objects) == 1
        assert objects[0].uid == "2"

    def test_remove_object_reference(self):
        ref = ObjectReference(api_version="v1", kind="Service", name="web", namespace="ns")
        objects = [ref]
        remove_object_reference(objects, ref)
        assert objects == []


class TestGroupVersionKind:
    def test_key_for_named_group(self):
        gvk = GroupVersionKind(group="maistra.io", version="v2", kind="ServiceMeshControlPlane")
        assert gvk.group_version == "maistra.io/v2"
        assert gvk.key == "maistra.io/v2, Kind=ServiceMeshControlPlane"

    def test_core_group(self):
        gvk = GroupVersionKind.from_api_version("v1", "Endpoints")
        assert gvk.group == ""
        assert gvk.group_version == "v1"

    def test_hashable(self):
        a = GroupVersionKind(group="apps", version="v1", kind="Deployment")
        b = GroupVersionKind.from_api_version("apps/v1", "Deployment")
        assert {a, b} == {a}

    def test_resource_list_has_kind(self):
        api_list = APIResourceList(
            group_version="apps/v1",
            resources=[APIResource(name="deployments", kind="Deployment")],
        )
        assert api_list.has_kind("Deployment")
        assert not api_list.has_kind("StatefulSet")


class TestConfigDefaults:
    def test_reconciler_config(self):
        config = ReconcilerConfig()
        assert config.requeue_delay == timedelta(minutes=60)
        assert config.requeue_delay_error == timedelta(seconds=5)
        assert config.condition_type == "Available"

    def test_detect_config_interval(self):
        assert DetectConfig().interval == timedelta(minutes=2)
        assert DetectConfig(delay=timedelta(seconds=3)).interval == timedelta(seconds=3)

    def test_reconcile_result_defaults(self):
        result = ReconcileResult()
        assert result.requeue is False
        assert result.requeue_after == timedelta(0)

    def test_managed_resource_status_not_shared(self):
        a = ManagedResource(api_version="example.com/v1", kind="App", metadata=ObjectMeta(name="a"))
        b = ManagedResource(api_version="example.com/v1", kind="App", metadata=ObjectMeta(name="b"))
        set_status_condition(a.status.conditions, _condition(ConditionStatus.TRUE, StatusReason.RECONCILING))

        assert b.status == CommonStatus()
