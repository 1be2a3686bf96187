"""Capability model: resource kinds and the discovery catalog."""

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict


def split_api_version(api_version: str) -> Tuple[str, str]:
    """Split ``"apps/v1"`` into ``("apps", "v1")``; the core group is ``""``."""
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


class GroupVersionKind(BaseModel):
    """Uniquely names a resource kind within a group/version."""

    model_config = ConfigDict(frozen=True)

    group: str = ""
    version: str
    kind: str

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "GroupVersionKind":
        group, version = split_api_version(api_version)
        return cls(group=group, version=version, kind=kind)

    @property
    def group_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @property
    def key(self) -> str:
        """Capability key used in the shared state store."""
        return f"{self.group}/{self.version}, Kind={self.kind}"

    def __str__(self) -> str:
        return self.key


class APIResource(BaseModel):
    """One resource served by a group/version."""

    name: str                               # plural, e.g. "deployments"
    kind: str                               # e.g. "Deployment"
    namespaced: bool = True


class APIResourceList(BaseModel):
    """All resources served under a single group/version."""

    group_version: str                      # e.g. "apps/v1", or "v1" for core
    resources: List[APIResource] = []

    def has_kind(self, kind: str) -> bool:
        return any(r.kind == kind for r in self.resources)
