"""Sample suites covering lifecycle edge cases for scripts/e2e_test.py."""

import suiterunner as sr
from suiterunner import Assert, AssertionFailure


@sr.test_class(category="Lifecycle")
class CounterSuite:
    counter = 0
    flag = False

    @sr.before_all
    def increment(self):
        self.counter += 1

    @sr.before_each
    def raise_flag(self):
        self.flag = True

    @sr.test_method
    def counter_is_one(self):
        Assert.are_equal(1, self.counter)
        Assert.is_true(self.flag)

    @sr.after_each
    def reset_flag(self):
        self.flag = False


@sr.test_class(category="Lifecycle", priority=3)
class BrokenSetupSuite:
    """Every case fails because suite setup raises."""

    @sr.before_all
    def connect(self):
        raise ConnectionError("engine process not running")

    @sr.test_method
    @sr.test_case("e2e4")
    @sr.test_case("d2d4")
    def accepts_move(self, move):
        pass


@sr.test_class(category="Lifecycle")
class CrashingSuite:
    @sr.test_method
    def wrapped_failure(self):
        try:
            Assert.are_equal(1, 2, "inner check")
        except AssertionFailure as e:
            raise RuntimeError("wrapper") from e

    @sr.test_method
    def unexpected_error(self):
        {}["missing"]
