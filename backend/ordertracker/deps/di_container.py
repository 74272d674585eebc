"""
Dependency injection container using dependency-injector.
Holds process-wide services; request-scoped services get their session
and identity from FastAPI dependencies instead.
"""

from dependency_injector import containers, providers

from ordertracker.services.health_service import HealthService
from ordertracker.services.email_service import EmailService
from ordertracker.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""
    
    # Configuration
    config = providers.Configuration()
    
    # Services
    health_service = providers.Singleton(
        HealthService,
    )
    
    email_service = providers.Singleton(
        EmailService,
    )
    
    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Container = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    """Install the container built at application startup."""
    global _container
    _container = container
