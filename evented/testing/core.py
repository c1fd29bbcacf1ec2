from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType
from typing import Generic, TypeVar

from typing_extensions import Self

from evented.domain import Aggregate, Event

A = TypeVar("A", bound=Aggregate)


class Result(Generic[A]):
    def __init__(self, aggregate: A, events: list[Event], errors: list[Exception]):
        self.aggregate = aggregate
        self.events = events
        self.errors = errors

    def contains_error_of_type(self, error_type: type[Exception]) -> bool:
        return any(isinstance(error, error_type) for error in self.errors)

    def state_matches(self, predicate: Callable[[A], bool]) -> bool:
        return predicate(self.aggregate)


class Expectation(ABC):
    @abstractmethod
    def was_met(self, result: Result) -> bool:
        pass

    @abstractmethod
    def describe(self) -> str:
        pass

    def assert_met(self, result: Result) -> None:
        if not self.was_met(result):
            raise AssertionError(f"Expectation not met: {self.describe()}")


class ContainsErrorOfExactType(Expectation):
    def __init__(self, error_type: type[Exception]):
        self.error_type = error_type

    def was_met(self, result: Result) -> bool:
        return result.contains_error_of_type(self.error_type)

    def describe(self) -> str:
        return f"should contain error of type {self.error_type.__name__}"


class DoesNotHaveErrors(Expectation):
    def was_met(self, result: Result) -> bool:
        return len(result.errors) == 0

    def describe(self) -> str:
        return "should apply every event without errors"


class StateMatches(Expectation):
    def __init__(self, predicate: Callable[[A], bool]):
        self.predicate = predicate

    def was_met(self, result: Result) -> bool:
        return result.state_matches(self.predicate)

    def describe(self) -> str:
        return "should match state with predicate"


class IsValid(Expectation):
    def __init__(self, valid: bool = True):
        self.valid = valid

    def was_met(self, result: Result) -> bool:
        return (not result.aggregate.validate()) is self.valid

    def describe(self) -> str:
        return "should be valid" if self.valid else "should be invalid"


class Scenario(ABC, Generic[A]):
    def __init__(self):
        self.expectations: list[Expectation] = []
        self.errors: list[Exception] = []

    @abstractmethod
    def build_result(self) -> Result[A]:
        pass

    @abstractmethod
    async def perform_actions(self) -> None:
        pass

    def assert_expectations(self, result: Result[A]) -> None:
        for expectation in self.expectations:
            expectation.assert_met(result)

    def should_raise(self, error_type: type[Exception]) -> Self:
        self.expectations.append(ContainsErrorOfExactType(error_type))
        return self

    def should_succeed(self) -> Self:
        self.expectations.append(DoesNotHaveErrors())
        return self

    async def execute_scenario(self) -> None:
        await self.perform_actions()
        self.assert_expectations(self.build_result())

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if exc_type is not None and exc_value is not None:
            raise exc_value
        else:
            await self.execute_scenario()
