"""Tests for module and class discovery."""

import pytest

from evented import Event
from evented.discovery import ClassScanner, ModuleScanner, _should_skip_module
from evented.users import events as user_events


@pytest.mark.parametrize(
    "module_name, skipped",
    [
        ("events", False),
        ("__init__", False),
        ("_private", True),
        ("test_events", True),
    ],
)
def test_should_skip_module(module_name, skipped):
    assert _should_skip_module(module_name) is skipped


def test_module_scanner_yields_package_and_submodules():
    names = [module.__name__ for module in ModuleScanner("evented.users").scan_all_modules()]

    assert names[0] == "evented.users"
    assert set(names) == {"evented.users", "evented.users.events", "evented.users.models"}


def test_module_scanner_recurses_into_subpackages():
    names = {module.__name__ for module in ModuleScanner("tests.fixtures.test_app").scan_all_modules()}

    assert "tests.fixtures.test_app.aggregates.tally" in names


def test_module_scanner_unknown_package():
    with pytest.raises(ImportError):
        ModuleScanner("evented.does_not_exist")


def test_class_scanner_finds_classes_defined_in_module():
    found = set(ClassScanner.find_subclasses(user_events, Event))

    # Event itself is imported into the module and excluded.
    assert found == {user_events.UserEvent, user_events.Created, user_events.Destroyed}


def test_class_scanner_applies_predicate():
    found = set(
        ClassScanner.find_subclasses(
            user_events, Event, lambda cls: cls.defines_mutation_rule()
        )
    )

    assert found == {user_events.Created, user_events.Destroyed}
