"""
Actions and desired state.

An action is one of four closed variants: create, update, delete, or an
error carried through the same pipeline. ``run`` hands the action to an
ActionRunner and returns the action's message; failures raise.
"""

from typing import TYPE_CHECKING, Iterable, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from reconcile_kernel.models.objects import ResourceObject

if TYPE_CHECKING:
    from reconcile_kernel.actions.runner import ActionRunner


class CreateAction(BaseModel):
    """Create a dependent that does not exist yet."""

    model_config = ConfigDict(frozen=True)

    action: Literal["create"] = "create"
    ref: ResourceObject
    message: str = ""
    skip_owner_ref: bool = False

    def run(self, runner: "ActionRunner") -> str:
        runner.create(self.ref, self.skip_owner_ref)
        return self.message


class UpdateAction(BaseModel):
    """Replace an existing dependent."""

    model_config = ConfigDict(frozen=True)

    action: Literal["update"] = "update"
    ref: ResourceObject
    message: str = ""
    skip_owner_ref: bool = False

    def run(self, runner: "ActionRunner") -> str:
        runner.update(self.ref, self.skip_owner_ref)
        return self.message


class DeleteAction(BaseModel):
    """Delete a dependent. A missing object is an error like any other."""

    model_config = ConfigDict(frozen=True)

    action: Literal["delete"] = "delete"
    ref: ResourceObject
    message: str = ""

    def run(self, runner: "ActionRunner") -> str:
        runner.delete(self.ref)
        return self.message


class ErrorAction(BaseModel):
    """A failed desired-state computation, surfaced when the action runs."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    action: Literal["error"] = "error"
    error: Exception
    message: str = ""

    def run(self, runner: "ActionRunner") -> str:
        runner.error(self.error)
        return self.message


Action = Union[CreateAction, UpdateAction, DeleteAction, ErrorAction]


class DesiredResourceState:
    """
    Ordered sequence of actions.
    Order is significant (dependencies before dependents); entries are never
    reordered or deduplicated, and ``None`` entries are dropped.
    """

    def __init__(self, actions: Optional[Iterable[Optional[Action]]] = None):
        self._actions: List[Action] = []
        if actions is not None:
            self.add_actions(actions)

    def add_action(self, action: Optional[Action]) -> "DesiredResourceState":
        if action is not None:
            self._actions.append(action)
        return self

    def add_actions(self, actions: Iterable[Optional[Action]]) -> "DesiredResourceState":
        for action in actions:
            self.add_action(action)
        return self

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __getitem__(self, index: int) -> Action:
        return self._actions[index]
