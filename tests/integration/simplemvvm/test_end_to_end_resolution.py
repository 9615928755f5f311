"""Integration tests for complete resolution scenarios."""

from abc import ABC, abstractmethod

import pytest

from simplemvvm import (
    CaptiveDependencyError,
    Content,
    CyclicDependencyError,
    Element,
    Host,
    Lifetime,
    ServiceRegistry,
    scoped,
    singleton,
    transient,
)


class A:
    def __init__(self, b: "B"):
        self.b = b


class B:
    def __init__(self, a: "A"):
        self.a = a


class TestDatabaseUserScenario:
    """A singleton database shared by scoped user services."""

    def setup_method(self):
        registry = ServiceRegistry()

        @singleton(registry=registry)
        class DatabaseService:
            pass

        @scoped(registry=registry)
        class UserService:
            def __init__(self, database: DatabaseService):
                self.database = database

        self.DatabaseService = DatabaseService
        self.UserService = UserService
        self.host = Host(registry)

    def test_database_is_singleton(self):
        """Test that the database is the same instance on every request."""
        assert self.host.get(self.DatabaseService) is self.host.get(self.DatabaseService)

    def test_user_services_per_scope_share_database(self):
        """Test that each scope has its own user service over one database."""
        scope1 = self.host.create_scope()
        scope2 = self.host.create_scope()

        users1 = scope1.get_or_create(self.UserService)
        users2 = scope2.get_or_create(self.UserService)

        assert users1 is not users2
        assert users1.database is users2.database
        assert users1.database is self.host.get(self.DatabaseService)
        assert scope1.get_or_create(self.UserService) is users1


class TestCycleScenario:
    """Two transient services depending on each other."""

    def test_cycle_fails_and_caches_nothing(self):
        """Test that resolving A fails with A -> B -> A and nothing is cached."""
        registry = ServiceRegistry()
        registry.add(A, Lifetime.TRANSIENT)
        registry.add(B, Lifetime.TRANSIENT)
        host = Host(registry)
        scope = host.create_scope()

        with pytest.raises(CyclicDependencyError) as exc_info:
            scope.get_or_create(A)

        assert exc_info.value.cycle == [A, B, A]
        assert "A -> B -> A" in str(exc_info.value)
        assert scope._cache == {}
        assert host.root_scope._cache == {}

    def test_cycle_between_cached_lifetimes_caches_nothing(self):
        """Test that a singleton cycle leaves the root scope empty."""
        registry = ServiceRegistry()
        registry.add(A, Lifetime.SINGLETON)
        registry.add(B, Lifetime.SINGLETON)
        host = Host(registry)

        with pytest.raises(CyclicDependencyError):
            host.get(A)

        assert host.root_scope._cache == {}


class TestCaptiveScenario:
    """A singleton that would capture a scoped service."""

    def test_captive_dependency_fails_before_construction(self):
        """Test that nothing is constructed or cached."""
        constructed = []
        registry = ServiceRegistry()

        @scoped(registry=registry)
        class RequestContext:
            def __init__(self):
                constructed.append("RequestContext")

        @singleton(registry=registry)
        class Config:
            def __init__(self):
                constructed.append("Config")

        @singleton(registry=registry)
        class ReportCache:
            def __init__(self, config: Config, context: RequestContext):
                constructed.append("ReportCache")

        host = Host(registry)
        scope = host.create_scope()

        with pytest.raises(CaptiveDependencyError):
            scope.get_or_create(ReportCache)

        assert constructed == []
        assert scope._cache == {}
        assert host.root_scope._cache == {}


class TestInterfaceResolution:
    """Services requested through their exposed base types."""

    def test_resolve_through_interface(self):
        """Test that an abstract base resolves to its single implementation."""
        registry = ServiceRegistry()

        class INotifier(ABC):
            @abstractmethod
            def notify(self, message: str) -> str:
                pass

        @singleton(exposes=(INotifier,), registry=registry)
        class ConsoleNotifier(INotifier):
            def notify(self, message: str) -> str:
                return f"console: {message}"

        @transient(registry=registry)
        class Workflow:
            def __init__(self, notifier: INotifier):
                self.notifier = notifier

        host = Host(registry)

        workflow = host.get(Workflow)

        assert workflow.notifier is host.get(ConsoleNotifier)
        assert workflow.notifier.notify("done") == "console: done"


class TestLifetimeProperties:
    """Lifetime guarantees across scopes."""

    def test_transient_new_on_every_call(self):
        """Test that transient services are never reused, even within a scope."""
        registry = ServiceRegistry()

        @transient(registry=registry)
        class Command:
            pass

        host = Host(registry)
        scope = host.create_scope()

        instances = [scope.get_or_create(Command) for _ in range(5)]

        for i, first in enumerate(instances):
            for second in instances[i + 1 :]:
                assert first is not second

    def test_singleton_shared_across_scopes(self):
        """Test that every scope sees the same singleton."""
        registry = ServiceRegistry()

        @singleton(registry=registry)
        class Settings:
            pass

        host = Host(registry)

        instances = {id(host.create_scope().get_or_create(Settings)) for _ in range(5)}

        assert instances == {id(host.get(Settings))}

    def test_scoped_dependency_shared_within_scope(self):
        """Test that services in one scope share their scoped dependencies."""
        registry = ServiceRegistry()

        @scoped(registry=registry)
        class UnitOfWork:
            pass

        @transient(registry=registry)
        class OrderHandler:
            def __init__(self, unit_of_work: UnitOfWork):
                self.unit_of_work = unit_of_work

        @transient(registry=registry)
        class InvoiceHandler:
            def __init__(self, unit_of_work: UnitOfWork):
                self.unit_of_work = unit_of_work

        host = Host(registry)

        with host.create_scope() as scope:
            orders = scope.get_or_create(OrderHandler)
            invoices = scope.get_or_create(InvoiceHandler)
            assert orders.unit_of_work is invoices.unit_of_work

        with host.create_scope() as other:
            assert other.get_or_create(OrderHandler).unit_of_work is not orders.unit_of_work


class TestContentAsService:
    """The content helper registered as an ordinary leaf singleton."""

    def test_content_is_leaf_singleton(self):
        """Test that a content collection can be injected like any service."""
        registry = ServiceRegistry()

        @singleton(registry=registry)
        class Elements(Content[Element]):
            items = (
                Element(name="Element 1", description="Description of Element 1"),
                Element(name="Element 2", description="Description of Element 2"),
            )

        @singleton(registry=registry)
        class MainViewModel:
            def __init__(self, elements: Elements):
                self.elements = elements

        host = Host(registry)

        view_model = host.get(MainViewModel)

        assert view_model.elements is host.get(Elements)
        assert view_model.elements.names() == ("Element 1", "Element 2")


class TestDisposalScenario:
    """Resources released when scopes and the host end."""

    def test_request_resources_released_per_scope(self):
        """Test that scoped and transient resources go with their scope, singletons with the host."""
        released = []
        registry = ServiceRegistry()

        @singleton(registry=registry)
        class ConnectionPool:
            def close(self):
                released.append("ConnectionPool")

        @scoped(registry=registry)
        class Session:
            def __init__(self, pool: ConnectionPool):
                self.pool = pool

            def close(self):
                released.append("Session")

        @transient(registry=registry)
        class Query:
            def __init__(self, session: Session):
                self.session = session

            def dispose(self):
                released.append("Query")

        host = Host(registry)

        with host.create_scope() as scope:
            scope.get_or_create(Query)

        assert released == ["Query", "Session"]

        host.dispose()

        assert released == ["Query", "Session", "ConnectionPool"]
