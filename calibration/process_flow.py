"""Lazy, branch-aware composition of calibration steps.

A ``Flow`` holds an environment value, or the pending step that produces it. Steps are
composed with ``do`` and conditional branches with ``if_``/``then``/``else_``.
Nothing runs until ``end`` is called, except the predicate of ``if_``: it is
evaluated immediately against the forced source value, while the branch
consequence stays deferred.

    result = (
        start(state)
        .do(resolve_script)
        .if_(lambda s: s.case_detection_supported)
        .then(detect_case_conversion)
        .else_(note_unsupported_script)
        .end()
    )

Exceptions raised by predicates or transforms are not caught here. They
surface from whichever call forced evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar, Union

from calibration.logging_utils import get_logger
from calibration.types import Environment

log = get_logger(__name__)

TEnv = TypeVar("TEnv", bound=Environment)

Step = Callable[[TEnv], "Flow[TEnv]"]

_UNSET = object()


class Flow(Generic[TEnv]):
    """A deferred environment value.

    A pending flow holds the flow it was built from and the step to apply to
    that flow's value. Forcing walks back to the nearest evaluated ancestor
    and applies the pending steps in order, caching each intermediate value,
    so long chains do not grow the call stack.
    """

    __slots__ = ("_value", "_source", "_transform")

    def __init__(
        self,
        value: object = _UNSET,
        source: Optional["Flow[TEnv]"] = None,
        transform: Optional[Step[TEnv]] = None,
    ) -> None:
        self._value = value
        self._source = source
        self._transform = transform

    @classmethod
    def start(cls, value: TEnv) -> "Flow[TEnv]":
        return cls(value)

    @classmethod
    def continue_(cls, value: TEnv) -> "Flow[TEnv]":
        """Same as ``start``; reads better when resuming after a checkpoint."""
        return cls(value)

    @property
    def evaluated(self) -> bool:
        return self._value is not _UNSET

    def do(self, transform: Step[TEnv]) -> "Flow[TEnv]":
        """Sequence ``transform`` after this flow. Evaluation is deferred."""
        return Flow(source=self, transform=transform)

    def if_(self, predicate: Callable[[TEnv], bool]) -> "IfNode[TEnv]":
        """Force this flow, test ``predicate`` now and open a branch."""
        env = self.end()
        condition = bool(predicate(env))
        log.debug("branch opened", extra={"condition": condition, "env_type": type(env).__name__})
        return IfNode(Flow.start(env), condition)

    def end(self) -> TEnv:
        """Force evaluation. The result is cached for later calls."""
        pending: List[Flow[TEnv]] = []
        node: Flow[TEnv] = self
        while not node.evaluated:
            pending.append(node)
            node = node._source  # type: ignore[assignment]

        value = node._value
        for node in reversed(pending):
            # A failing step leaves this node and its descendants pending.
            value = node._transform(value).end()  # type: ignore[misc]
            node._value = value
            node._source = None
            node._transform = None
        return value  # type: ignore[return-value]

    def __repr__(self) -> str:
        state = "evaluated" if self.evaluated else "pending"
        return f"<Flow {state}>"


@dataclass(frozen=True)
class IfNode(Generic[TEnv]):
    """Branch opened by ``Flow.if_``; neither arm applied yet."""

    end_if: Flow[TEnv]
    condition: bool

    def then(self, transform: Step[TEnv]) -> "ThenNode[TEnv]":
        flow = self.end_if.do(transform) if self.condition else self.end_if
        return ThenNode(flow, self.condition)


@dataclass(frozen=True)
class ThenNode(Generic[TEnv]):
    """Branch after ``then``; the condition is still available to ``else_``."""

    end_if: Flow[TEnv]
    condition: bool

    def else_(self, transform: Step[TEnv]) -> "ElseNode[TEnv]":
        flow = self.end_if if self.condition else self.end_if.do(transform)
        return ElseNode(flow)


@dataclass(frozen=True)
class ElseNode(Generic[TEnv]):
    """Closed branch. Only the resulting flow is exposed."""

    end_if: Flow[TEnv]

    def else_if(self, predicate: Callable[[TEnv], bool]) -> IfNode[TEnv]:
        return self.end_if.if_(predicate)

    def do(self, transform: Step[TEnv]) -> Flow[TEnv]:
        return self.end_if.do(transform)

    def end(self) -> TEnv:
        return self.end_if.end()


def start(value: TEnv) -> Flow[TEnv]:
    return Flow.start(value)


def continue_(value: TEnv) -> Flow[TEnv]:
    return Flow.continue_(value)


def end(computation: Union[Flow[TEnv], ElseNode[TEnv]]) -> TEnv:
    return computation.end()
