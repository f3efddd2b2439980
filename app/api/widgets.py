"""Widget API routes; every route sits behind the bearer-token gate."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import Response
from sqlalchemy.orm import Session

from app.core.auth import require_bearer_token
from app.core.body import decode_json_object
from app.core.body import read_raw_body
from app.db.base import get_db_session
from app.schemas.error import PROBLEM_RESPONSES
from app.schemas.widget import Widget
from app.schemas.widget import WidgetListResponse
from app.services.widgets import create_widget_service
from app.services.widgets import delete_widget_service
from app.services.widgets import get_widget_service
from app.services.widgets import list_widgets_service
from app.services.widgets import update_widget_service

router = APIRouter(
    tags=["widgets"],
    dependencies=[Depends(require_bearer_token)],
    responses=PROBLEM_RESPONSES,
)


@router.post("/widgets", response_model=Widget, status_code=201)
def create_widget_endpoint(
    request: Request,
    response: Response,
    raw_body: bytes = Depends(read_raw_body),
    session: Session = Depends(get_db_session),
) -> Widget:
    """Create a widget and point to it with a Location header."""
    widget = create_widget_service(session, decode_json_object(raw_body))
    response.headers["Location"] = str(request.url_for("show_widget", widget_id=str(widget.id)))
    return widget


@router.get("/widgets", response_model=WidgetListResponse)
def list_widgets_endpoint(
    session: Session = Depends(get_db_session),
) -> WidgetListResponse:
    """List widgets."""
    widgets = [Widget.model_validate(widget) for widget in list_widgets_service(session)]
    return WidgetListResponse(widgets=widgets)


@router.get("/widgets/{widget_id}", response_model=Widget, name="show_widget")
def get_widget_endpoint(
    widget_id: str,
    session: Session = Depends(get_db_session),
) -> Widget:
    """Get a single widget by id."""
    return get_widget_service(session, widget_id)


def _update_widget(session: Session, widget_id: str, raw_body: bytes, *, partial: bool) -> Widget:
    widget = get_widget_service(session, widget_id)
    return update_widget_service(session, widget, decode_json_object(raw_body), partial=partial)


@router.put("/widgets/{widget_id}", response_model=Widget)
def replace_widget_endpoint(
    widget_id: str,
    raw_body: bytes = Depends(read_raw_body),
    session: Session = Depends(get_db_session),
) -> Widget:
    """Replace a widget; fields left out of the body are cleared."""
    return _update_widget(session, widget_id, raw_body, partial=False)


@router.patch("/widgets/{widget_id}", response_model=Widget)
def patch_widget_endpoint(
    widget_id: str,
    raw_body: bytes = Depends(read_raw_body),
    session: Session = Depends(get_db_session),
) -> Widget:
    """Partially update a widget; fields left out of the body keep their values."""
    return _update_widget(session, widget_id, raw_body, partial=True)


@router.delete("/widgets/{widget_id}", status_code=204)
def delete_widget_endpoint(
    widget_id: str,
    session: Session = Depends(get_db_session),
) -> Response:
    """Delete a widget; unknown ids are answered with 204 as well."""
    delete_widget_service(session, widget_id)
    return Response(status_code=204)
