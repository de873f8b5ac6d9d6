import pytest

from scopebind import (
    ClassProvider,
    Container,
    FactoryProvider,
    Lifetime,
    ResolutionError,
    UnregisteredTokenError,
    ValueProvider,
)


def test_resolve_unregistered_string_token_raises():
    c = Container()
    with pytest.raises(UnregisteredTokenError) as ctx:
        c.resolve("unknown-token")
    assert ctx.value.token == "unknown-token"
    assert "unknown-token" in str(ctx.value)


def test_unregistered_token_error_is_a_key_error_and_resolution_error():
    c = Container()
    with pytest.raises(KeyError):
        c.resolve("unknown-token")
    with pytest.raises(ResolutionError):
        c.resolve("unknown-token")


def test_resolve_unregistered_class_is_not_autowired():
    c = Container()

    class A: ...

    with pytest.raises(UnregisteredTokenError):
        c.resolve(A)


def test_resolve_register_bare_class_constructs_it():
    c = Container()

    class Base: ...

    class Derived(Base): ...

    c.register(Base, Derived)
    assert isinstance(c.resolve(Base), Derived)


def test_resolve_class_provider_resolves_dependencies_in_order():
    c = Container()

    class DB: ...

    class Cache: ...

    class Repo:
        def __init__(self, db, cache):
            self.db = db
            self.cache = cache

    c.register(DB, DB)
    c.register("cache", Cache)
    c.register(Repo, ClassProvider(Repo, (DB, "cache")))

    repo = c.resolve(Repo)
    assert isinstance(repo.db, DB)
    assert isinstance(repo.cache, Cache)


def test_resolve_recursively_through_several_levels():
    c = Container()

    class DB: ...

    class Repo:
        def __init__(self, db: DB):
            self.db = db

    class Service:
        def __init__(self, repo: Repo):
            self.repo = repo

    c.register(DB, DB)
    c.register(Repo, Repo, dependencies=[DB])
    c.register(Service, Service, dependencies=[Repo])

    svc = c.resolve(Service)
    assert isinstance(svc.repo, Repo)
    assert isinstance(svc.repo.db, DB)


def test_missing_dependency_mid_graph_fails_whole_resolve():
    c = Container()

    class Repo:
        def __init__(self, db):
            self.db = db

    class Service:
        def __init__(self, repo):
            self.repo = repo

    c.register(Repo, Repo, dependencies=["db"])
    c.register(Service, Service, dependencies=[Repo], lifetime=Lifetime.SINGLETON)

    with pytest.raises(UnregisteredTokenError) as ctx:
        c.resolve(Service)
    assert ctx.value.token == "db"

    # Nothing partial was cached: once the dependency exists the graph builds.
    c.register_instance("db", object())
    assert isinstance(c.resolve(Service).repo, Repo)


def test_value_provider_returns_the_same_object():
    c = Container()
    value = {"port": 5555}

    c.register("config", ValueProvider(value))
    assert c.resolve("config") is value
    assert c.resolve("config") is value


def test_register_instance_is_a_value_provider():
    c = Container()
    value = object()

    reg = c.register_instance("thing", value)
    assert isinstance(reg.provider, ValueProvider)
    assert c.resolve("thing") is value


def test_factory_receives_resolving_container():
    c = Container()
    received = []

    def make_db(cont):
        received.append(cont)
        return object()

    c.register("db", FactoryProvider(make_db))
    c.resolve("db")
    assert received == [c]


def test_factory_receives_scope_when_resolved_from_scope():
    c = Container()
    received = []

    def make_db(cont):
        received.append(cont)
        return object()

    c.register_factory("db", make_db)
    scope = c.create_scope()
    scope.resolve("db")
    assert received[0] is scope


def test_factory_may_resolve_other_tokens():
    c = Container()

    class DB: ...

    class Repo:
        def __init__(self, db):
            self.db = db

    c.register_singleton(DB)
    c.register_factory(Repo, lambda cont: Repo(cont.resolve(DB)))

    assert c.resolve(Repo).db is c.resolve(DB)


def test_factory_exception_propagates_unchanged():
    c = Container()

    def broken(_):
        msg = "boom"
        raise LookupError(msg)

    c.register_factory("broken", broken)
    with pytest.raises(LookupError, match="boom"):
        c.resolve("broken")


def test_latest_registration_wins_for_resolve():
    c = Container()
    first, second = object(), object()

    c.register_instance("thing", first)
    c.register_instance("thing", second)

    assert c.resolve("thing") is second


def test_factory_may_return_none_and_it_is_cached():
    c = Container()
    calls = []

    def make(_):
        calls.append(1)

    c.register_factory("nothing", make, lifetime=Lifetime.SINGLETON)
    assert c.resolve("nothing") is None
    assert c.resolve("nothing") is None
    assert len(calls) == 1


def test_is_registered_and_registrations():
    c = Container()

    class A: ...

    assert not c.is_registered(A)
    reg1 = c.register(A, A)
    reg2 = c.register_singleton(A)
    assert c.is_registered(A)
    assert c.registrations(A) == (reg1, reg2)
    assert reg1.id < reg2.id


def test_is_registered_with_unhashable_token_is_false():
    c = Container()
    assert not c.is_registered(["not", "hashable"])
