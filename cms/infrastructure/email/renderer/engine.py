from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from cms.config.settings import Settings
from cms.infrastructure.email.models import EmailMessage

FALLBACK_LOCALE = "en"


@dataclass(slots=True)
class EmailTemplateRenderer:
    base_path: Path
    env: Environment

    @classmethod
    def create_default(cls) -> EmailTemplateRenderer:
        base = Path(__file__).resolve().parent.parent / "templates"
        env = Environment(
            loader=FileSystemLoader(str(base)),
            autoescape=select_autoescape(["html", "xml"]),
            enable_async=False,
        )
        return cls(base_path=base, env=env)

    def _resolve(self, template_key: str, locale: str, name: str) -> str:
        # e.g. en/password_change/subject.txt.j2
        return f"{locale}/{template_key}/{name}"

    def _load(self, path: str, locale: str):
        try:
            return self.env.get_template(path)
        except TemplateNotFound:
            if locale != FALLBACK_LOCALE:
                return self.env.get_template(path.replace(f"{locale}/", f"{FALLBACK_LOCALE}/", 1))
            raise

    def render(
        self,
        *,
        template_key: str,
        settings: Settings,
        context: dict[str, Any],
        locale: str | None = None,
    ) -> EmailMessage:
        loc = (locale or settings.email_default_locale or FALLBACK_LOCALE).lower()
        ctx = {
            "app": {
                "name": settings.site_name,
                "primary_color": settings.email_primary_color,
                "manager_url": settings.manager_url,
            },
            **context,
        }

        subject = self._load(self._resolve(template_key, loc, "subject.txt.j2"), loc).render(ctx)
        text = self._load(self._resolve(template_key, loc, "body.txt.j2"), loc).render(ctx)
        try:
            html_tpl = self._load(self._resolve(template_key, loc, "body.html.j2"), loc)
        except TemplateNotFound:
            html_tpl = None

        html = None
        if html_tpl is not None:
            inner = html_tpl.render(ctx)
            try:
                layout = self._load(f"{loc}/_layout.html.j2", loc)
            except TemplateNotFound:
                layout = None
            html = layout.render({**ctx, "content": inner}) if layout is not None else inner

        return EmailMessage(subject=subject.strip(), to=[], text=text.strip(), html=html)
