from pydantic import BaseModel as _BaseModel, ConfigDict, Field, computed_field
from typing import Awaitable, Callable, TypeVar
from typing_extensions import ParamSpec
from functools import wraps, partial
import asyncio

from .logger import build_logger
from .cancel import CancelToken

T = TypeVar("T")
P = ParamSpec("P")


class BaseModel(_BaseModel):
    model_config = ConfigDict(
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )


def executor_function(sync_function: Callable[P, T]) -> Callable[P, Awaitable[T]]:
    @wraps(sync_function)
    async def sync_wrapper(*args: P.args, **kwargs: P.kwargs):
        """
        Asynchronous function that wraps a sync function with an executor.
        """

        loop = asyncio.get_running_loop()
        internal_function = partial(sync_function, *args, **kwargs)
        return await loop.run_in_executor(None, internal_function)

    return sync_wrapper


__all__ = (
    "BaseModel",
    "Field",
    "computed_field",
    "build_logger",
    "executor_function",
    "CancelToken",
)
