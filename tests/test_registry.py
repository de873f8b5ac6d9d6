import pytest

from scopebind import Lifetime, UnregisteredTokenError, ValueProvider
from scopebind._registry import Registry


def test_add_assigns_increasing_ids():
    reg = Registry()

    r1 = reg.add("a", ValueProvider(1))
    r2 = reg.add("b", ValueProvider(2))
    r3 = reg.add("a", ValueProvider(3), Lifetime.SINGLETON)

    assert r1.id < r2.id < r3.id
    assert r3.lifetime is Lifetime.SINGLETON


def test_registrations_for_keeps_insertion_order():
    reg = Registry()

    r1 = reg.add("a", ValueProvider(1))
    reg.add("b", ValueProvider(2))
    r3 = reg.add("a", ValueProvider(3))

    assert reg.registrations_for("a") == (r1, r3)
    assert reg.registrations_for("missing") == ()


def test_active_is_last_registration():
    reg = Registry()

    reg.add("a", ValueProvider(1))
    last = reg.add("a", ValueProvider(2))

    assert reg.active("a") is last


def test_active_unregistered_raises():
    reg = Registry()

    with pytest.raises(UnregisteredTokenError):
        reg.active("a")


def test_contains_len_and_tokens():
    reg = Registry()

    reg.add("a", ValueProvider(1))
    reg.add("a", ValueProvider(2))
    reg.add(int, ValueProvider(3))

    assert "a" in reg
    assert int in reg
    assert "b" not in reg
    assert len(reg) == 3
    assert list(reg.tokens()) == ["a", int]


def test_clear_does_not_reuse_ids():
    reg = Registry()

    before = reg.add("a", ValueProvider(1))
    reg.clear()
    after = reg.add("a", ValueProvider(1))

    assert len(reg) == 1
    assert after.id > before.id


def test_registration_is_immutable():
    reg = Registry()
    r = reg.add("a", ValueProvider(1))

    with pytest.raises(AttributeError):
        r.token = "b"  # type: ignore[misc]
