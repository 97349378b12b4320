from typing import Any, Callable
from pico_ioc import MethodCtx, MethodInterceptor, component
from .decorators import TRANSACTIONAL_META, QUERY_META, REPOSITORY_META
from .session import SessionManager

_QUERY_DEFAULTS: dict[str, Any] = {
    "propagation": "REQUIRED",
    "read_only": True,
    "isolation_level": None,
    "rollback_for": (Exception,),
    "no_rollback_for": (),
}


@component
class TransactionalInterceptor(MethodInterceptor):
    def __init__(self, session_manager: SessionManager):
        self.sm = session_manager

    def invoke(self, ctx: MethodCtx, call_next: Callable[[MethodCtx], Any]) -> Any:
        func = getattr(ctx.cls, ctx.name, None)
        meta = getattr(func, TRANSACTIONAL_META, None)

        if not meta:
            if getattr(func, QUERY_META, None) is not None:
                meta = _QUERY_DEFAULTS
            elif getattr(ctx.cls, REPOSITORY_META, None) is not None:
                meta = {**_QUERY_DEFAULTS, "read_only": False}

        if not meta:
            return call_next(ctx)

        with self.sm.transaction(
            propagation=meta["propagation"],
            read_only=meta["read_only"],
            isolation_level=meta["isolation_level"],
            rollback_for=meta["rollback_for"],
            no_rollback_for=meta["no_rollback_for"],
        ):
            return call_next(ctx)
