import inspect
import logging
from typing import Any, Callable, Mapping, Sequence

from pico_ioc import MethodCtx, MethodInterceptor, component
from sqlalchemy import text

from .decorators import QUERY_META, REPOSITORY_META
from .session import SessionManager, get_session
from .paging import ASC, Page, PageRequest, Slice, Sort

log = logging.getLogger(__name__)


@component
class RepositoryQueryInterceptor(MethodInterceptor):
    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    def invoke(self, ctx: MethodCtx, call_next: Callable[[MethodCtx], Any]) -> Any:
        func = getattr(ctx.cls, ctx.name, None)
        meta = getattr(func, QUERY_META, None)
        if meta is None:
            return call_next(ctx)
        session = get_session(self.session_manager)
        params = self._bind_params(func, ctx.args, ctx.kwargs)
        repo_meta = getattr(ctx.cls, REPOSITORY_META, {}) or {}
        entity = repo_meta.get("entity")
        mode = meta.get("mode")
        if mode == "sql":
            return self._execute(session, meta, params, meta.get("sql"), entity=None)
        if mode == "expr":
            return self._execute(session, meta, params, self._expr_sql(meta, entity), entity)
        raise RuntimeError(f"Unsupported query mode: {mode!r}")

    def _bind_params(
        self,
        func: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> dict[str, Any]:
        sig = inspect.signature(func)
        bound = sig.bind_partial(None, *args, **kwargs)
        bound.apply_defaults()
        arguments = dict(bound.arguments)
        arguments.pop("self", None)
        return arguments

    def _expr_sql(self, meta: dict[str, Any], entity: Any) -> str:
        if entity is None or not hasattr(entity, "__tablename__"):
            raise RuntimeError(
                "@query with expr requires @repository(entity=...) and an entity with __tablename__"
            )
        base_sql = f"SELECT * FROM {entity.__tablename__}"
        expr = meta.get("expr")
        if expr:
            base_sql += f" WHERE {expr}"
        return base_sql

    def _order_by(self, entity: Any, sorts: Sequence[Sort]) -> tuple[str, list[Sort]]:
        """Builds ORDER BY from ``sorts``, dropping unknown columns.

        The primary key is appended ascending when no directive uses it, so
        rows with equal sort values keep a stable order across pages.
        """
        table = entity.__table__
        valid_columns = {c.name for c in table.columns}
        applied: list[Sort] = []
        for s in sorts:
            if s.field not in valid_columns:
                log.debug("RepositoryQueryInterceptor: dropping unknown sort field %r", s.field)
                continue
            applied.append(s)
        used = {s.field for s in applied}
        for column in table.primary_key.columns:
            if column.name not in used:
                applied.append(Sort(field=column.name, direction=ASC))
        clause = ", ".join(f"{s.field} {s.direction.upper()}" for s in applied)
        return clause, applied

    def _execute(
        self,
        session: Any,
        meta: dict[str, Any],
        params: dict[str, Any],
        sql: str,
        entity: Any,
    ) -> Any:
        paged = meta.get("paged", False)
        sliced = meta.get("sliced", False)
        page_req = None
        if paged or sliced:
            page_req = params.pop("page", None)
            if not isinstance(page_req, PageRequest):
                kind = "SQL" if meta.get("mode") == "sql" else "expr"
                raise TypeError(f"Paged {kind} query requires a 'page: PageRequest' parameter")

        applied: list[Sort] = []
        if page_req is not None and entity is not None:
            clause, applied = self._order_by(entity, page_req.sorts)
            if clause:
                sql += f" ORDER BY {clause}"

        if paged:
            count_sql = f"SELECT COUNT(*) FROM ({sql}) AS sub"
            total = session.execute(text(count_sql), params).scalar_one()
            rows = self._fetch_window(session, sql, params, page_req.size, page_req.offset)
            return Page(
                content=rows,
                total_elements=total,
                page=page_req.page,
                size=page_req.size,
                sort=applied,
            )
        if sliced:
            rows = self._fetch_window(session, sql, params, page_req.size + 1, page_req.offset)
            return Slice(
                content=rows[: page_req.size],
                page=page_req.page,
                size=page_req.size,
                has_next=len(rows) > page_req.size,
                sort=applied,
            )
        rows = session.execute(text(sql), params).mappings().all()
        if meta.get("unique", False):
            return rows[0] if rows else None
        return rows

    def _fetch_window(
        self,
        session: Any,
        sql: str,
        params: dict[str, Any],
        limit: int,
        offset: int,
    ) -> list[Any]:
        exec_params = {**params, "_limit": limit, "_offset": offset}
        result = session.execute(text(f"{sql} LIMIT :_limit OFFSET :_offset"), exec_params)
        return list(result.mappings().all())
