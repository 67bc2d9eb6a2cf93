from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cms.application.errors import AppError, NotFound
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.application.use_cases.dashboard import recently_edited_resources

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WidgetRenderer:
    env: Environment
    manager_url: str = ""

    @classmethod
    def create_default(cls, *, manager_url: str = "") -> WidgetRenderer:
        base = Path(__file__).resolve().parent / "templates"
        env = Environment(
            loader=FileSystemLoader(str(base)),
            autoescape=select_autoescape(["html", "xml", "j2"]),
        )
        return cls(env=env, manager_url=manager_url)

    def render(self, template: str, context: dict[str, Any]) -> str:
        return self.env.get_template(template).render(
            {"manager_url": self.manager_url, **context}
        )


class DashboardWidget(ABC):
    key: str
    template: str

    def __init__(self, *, uow: UnitOfWork, renderer: WidgetRenderer, user_id: int) -> None:
        self.uow = uow
        self.renderer = renderer
        self.user_id = user_id

    @abstractmethod
    async def render(self) -> str: ...


class RecentlyEditedResourcesWidget(DashboardWidget):
    """Grid of the resources most recently edited by the active user."""

    key = "recently_edited_resources"
    template = "recently_edited_resources.html.j2"
    limit = 10

    async def render(self) -> str:
        try:
            resources = await recently_edited_resources.execute(
                self.uow, self.user_id, limit=self.limit
            )
        except AppError as exc:
            logger.warning("Could not load recently edited resources: %s", exc.message)
            resources = []
        return self.renderer.render(self.template, {"resources": resources})


WIDGETS: dict[str, type[DashboardWidget]] = {
    RecentlyEditedResourcesWidget.key: RecentlyEditedResourcesWidget,
}


def get_widget_class(key: str) -> type[DashboardWidget]:
    try:
        return WIDGETS[key]
    except KeyError as exc:
        raise NotFound(f"Unknown dashboard widget: {key}") from exc
