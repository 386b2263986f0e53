from contextlib import contextmanager
from contextvars import ContextVar

OP_CTX = ContextVar("storage_op_ctx", default=None)


def get_op_ctx(key, default=None):
    ctx = OP_CTX.get()
    return ctx[key] if ctx and key in ctx else default


def update_op_ctx(**kwargs):
    ctx = OP_CTX.get()
    if ctx is not None:
        ctx.update(kwargs)


@contextmanager
def set_op_ctx(**data):
    # Nested operations (read -> read_stream) keep the outer fields.
    outer = OP_CTX.get()
    token = OP_CTX.set({**outer, **data} if outer else data)
    try:
        yield
    finally:
        OP_CTX.reset(token)
