from __future__ import annotations

from typing import Awaitable, Callable

from cms.application.use_cases.users import update_user

DEFAULT_CLASS_KEY = "user"

UpdateProcessor = Callable[..., Awaitable[update_user.UpdateUserResult]]

# Derived user classes may register their own update workflow under their
# class key; anything unknown falls back to the default processor.
UPDATE_PROCESSORS: dict[str, UpdateProcessor] = {
    DEFAULT_CLASS_KEY: update_user.execute,
}


def register(class_key: str, processor: UpdateProcessor) -> None:
    UPDATE_PROCESSORS[class_key] = processor


def resolve(class_key: str | None) -> UpdateProcessor:
    return UPDATE_PROCESSORS.get(class_key or DEFAULT_CLASS_KEY, UPDATE_PROCESSORS[DEFAULT_CLASS_KEY])
