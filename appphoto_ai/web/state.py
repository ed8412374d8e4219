"""In-memory registry of mounted views."""

import uuid
from typing import Any


class ViewRegistry:
    """Hold controllers for mounted views, keyed by a random id.

    Nothing here outlives the process.
    """

    def __init__(self):
        self._views: dict[str, Any] = {}

    def add(self, controller: Any) -> str:
        view_id = uuid.uuid4().hex
        self._views[view_id] = controller
        return view_id

    def get(self, view_id: str, kind: type | None = None) -> Any | None:
        """Look up a view, optionally requiring a controller type."""
        controller = self._views.get(view_id)
        if kind is not None and not isinstance(controller, kind):
            return None
        return controller

    def remove(self, view_id: str) -> bool:
        return self._views.pop(view_id, None) is not None
