import contextvars
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

log = logging.getLogger(__name__)

PROPAGATIONS = frozenset({"REQUIRED", "REQUIRES_NEW", "SUPPORTS", "MANDATORY"})

_tx_context: contextvars.ContextVar["TransactionContext | None"] = contextvars.ContextVar(
    "pico_paging_tx_context", default=None
)


class TransactionContext:
    __slots__ = ("session",)

    def __init__(self, session: Session):
        self.session = session


class SessionManager:
    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 5,
        pool_pre_ping: bool = True,
        pool_recycle: int = 3600,
    ):
        self._engine: Engine = create_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            pool_pre_ping=pool_pre_ping,
            pool_recycle=pool_recycle,
        )
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_session(self) -> Session:
        return self._session_factory()

    def get_current_session(self) -> Optional[Session]:
        ctx = _tx_context.get()
        return ctx.session if ctx is not None else None

    def dispose(self) -> None:
        self._engine.dispose()

    @contextmanager
    def transaction(
        self,
        propagation: str = "REQUIRED",
        read_only: bool = False,
        isolation_level: Optional[str] = None,
        rollback_for: tuple[type[BaseException], ...] = (Exception,),
        no_rollback_for: tuple[type[BaseException], ...] = (),
    ) -> Generator[Session, None, None]:
        if propagation not in PROPAGATIONS:
            raise ValueError(f"Unknown propagation: {propagation}")
        current = _tx_context.get()
        log.debug(
            "SessionManager.transaction: propagation=%s, context=%s",
            propagation,
            "ACTIVE" if current else "NONE",
        )

        if propagation == "MANDATORY":
            if current is None:
                log.error("SessionManager: MANDATORY propagation requires active transaction")
                raise RuntimeError("MANDATORY propagation requires active transaction")
            yield current.session
            return

        if propagation == "SUPPORTS":
            if current is not None:
                yield current.session
                return
            session = self.create_session()
            try:
                yield session
            finally:
                session.close()
            return

        if propagation == "REQUIRED" and current is not None:
            yield current.session
            return

        # REQUIRED without a transaction, or REQUIRES_NEW: start one, suspending any parent.
        parent_token = _tx_context.set(None)
        try:
            with self._start_transaction(
                read_only=read_only,
                isolation_level=isolation_level,
                rollback_for=rollback_for,
                no_rollback_for=no_rollback_for,
            ) as session:
                yield session
        finally:
            _tx_context.reset(parent_token)

    @contextmanager
    def _start_transaction(
        self,
        read_only: bool,
        isolation_level: Optional[str],
        rollback_for: tuple[type[BaseException], ...],
        no_rollback_for: tuple[type[BaseException], ...],
    ) -> Generator[Session, None, None]:
        session = self.create_session()
        log.debug("SessionManager: transaction started, session=%s", id(session))
        if isolation_level:
            session.connection(execution_options={"isolation_level": isolation_level})

        token = _tx_context.set(TransactionContext(session))
        try:
            yield session
            if not read_only:
                session.commit()
        except BaseException as e:
            if isinstance(e, no_rollback_for) and not read_only:
                log.debug("SessionManager: committing despite %s, session=%s", e.__class__.__name__, id(session))
                session.commit()
            else:
                log.warning(
                    "SessionManager: rolling back due to %s, session=%s",
                    e.__class__.__name__,
                    id(session),
                )
                session.rollback()
            raise
        finally:
            _tx_context.reset(token)
            session.close()


def get_session(manager: SessionManager) -> Session:
    session = manager.get_current_session()
    if session is None:
        raise RuntimeError("No active transaction")
    return session
