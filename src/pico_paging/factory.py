import logging
from typing import List

from pico_ioc import factory, provides

from .config import DatabaseConfigurer, DatabaseSettings
from .session import SessionManager

log = logging.getLogger(__name__)


@factory
class SqlAlchemyFactory:
    @provides(SessionManager, scope="singleton")
    def create_session_manager(
        self,
        settings: DatabaseSettings,
        configurers: List[DatabaseConfigurer],
    ) -> SessionManager:
        manager = SessionManager(
            url=settings.url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            pool_pre_ping=settings.pool_pre_ping,
            pool_recycle=settings.pool_recycle,
        )
        for configurer in sorted(configurers, key=lambda c: getattr(c, "priority", 0)):
            log.debug("SqlAlchemyFactory: running %s", type(configurer).__name__)
            configurer.configure(manager.engine)
        return manager
