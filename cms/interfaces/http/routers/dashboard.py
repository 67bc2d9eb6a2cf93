from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from cms.infrastructure.auth.context import AuthContext
from cms.infrastructure.dashboard.widgets import WidgetRenderer, get_widget_class
from cms.interfaces.http.deps import get_auth_context, get_uow, get_widget_renderer

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/widgets/{widget}", response_class=HTMLResponse)
async def render_widget(
    widget: str,
    context: AuthContext = Depends(get_auth_context),
    uow=Depends(get_uow),
    renderer: WidgetRenderer = Depends(get_widget_renderer),
) -> HTMLResponse:
    widget_class = get_widget_class(widget)
    html = await widget_class(uow=uow, renderer=renderer, user_id=context.user_id).render()
    return HTMLResponse(html)
