"""
Assertion sinks: where a validation run reports passes and failures.

- CollectingSink records everything and is inspected after the run.
- UnitTestSink hands each assertion to a unittest.TestCase.
- StrictSink raises on the first failure; the project's own tests use it to
  check exact failure messages.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from .exceptions import ModelCheckError, ValidationFailure

logger = logging.getLogger(__name__)


class AssertionSink(ABC):

    @abstractmethod
    def assert_true(self, condition, message: str = '') -> None:
        pass

    @abstractmethod
    def assert_equal(self, expected, actual, message: str = '') -> None:
        pass

    def fail(self, error: ModelCheckError) -> None:
        """Report a validation error."""
        self.assert_true(False, str(error))


class CollectingSink(AssertionSink):
    """Records passes and failures of a run."""

    def __init__(self):
        self.passes: List[str] = []
        self.failures: List[str] = []
        self.errors: List[ModelCheckError] = []

    def assert_true(self, condition, message: str = '') -> None:
        if condition is True:
            self.passes.append(message)
        else:
            logger.warning(message or "Failed asserting that false is true.")
            self.failures.append(message or "Failed asserting that false is true.")

    def assert_equal(self, expected, actual, message: str = '') -> None:
        self.assert_true(expected == actual, message or f"Failed asserting that {actual!r} equals {expected!r}.")

    def fail(self, error: ModelCheckError) -> None:
        self.errors.append(error)
        super().fail(error)

    @property
    def ok(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise an AssertionError listing every failure, if there were any."""
        if self.failures:
            raise AssertionError(
                f"{len(self.failures)} model check failure(s):\n" +
                "\n".join(f"  - {f}" for f in self.failures)
            )


class UnitTestSink(AssertionSink):
    """Delegates to the assertion methods of a unittest.TestCase."""

    def __init__(self, testcase):
        self.testcase = testcase

    def assert_true(self, condition, message: str = '') -> None:
        self.testcase.assertTrue(condition is True, message or None)

    def assert_equal(self, expected, actual, message: str = '') -> None:
        self.testcase.assertEqual(expected, actual, message or None)


class StrictSink(AssertionSink):
    """Raises immediately on failure instead of recording it."""

    def assert_true(self, condition, message: str = '') -> None:
        if condition is not True:
            raise ValidationFailure(message or "Failed asserting that false is true.")

    def assert_equal(self, expected, actual, message: str = '') -> None:
        if expected != actual:
            raise ValidationFailure(message or f"Failed asserting that {actual!r} equals {expected!r}.")

    def fail(self, error: ModelCheckError) -> None:
        raise error
