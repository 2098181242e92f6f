from __future__ import annotations

from contextvars import ContextVar, Token

_user_id_ctx: ContextVar[str | None] = ContextVar(
    'logdock_user_id',
    default=None)


def set_user_id(user_id: str | None) -> Token:
    """
    Set the user id for the current context (request, task, ...).

    Pair with `reset_user_id`, and pass `current_user_id` as the
    `get_user_id` callback of a `LogDockConfig` to pick it up.
    """
    return _user_id_ctx.set(user_id)


def reset_user_id(token: Token) -> None:
    _user_id_ctx.reset(token)


def current_user_id() -> str | None:
    return _user_id_ctx.get()
