"""Single-selection model over routes and reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...models.domain import TapEvent, TapKind


class SelectionKind(str, Enum):
    NONE = "none"
    ROUTE = "route"
    REPORT = "report"


@dataclass(frozen=True, slots=True)
class Selection:
    kind: SelectionKind = SelectionKind.NONE
    route_index: Optional[int] = None
    report_id: Optional[str] = None

    @classmethod
    def none(cls) -> "Selection":
        return cls()

    @classmethod
    def route(cls, index: int) -> "Selection":
        return cls(kind=SelectionKind.ROUTE, route_index=index)

    @classmethod
    def report(cls, report_id: str) -> "Selection":
        return cls(kind=SelectionKind.REPORT, report_id=report_id)

    @property
    def is_none(self) -> bool:
        return self.kind is SelectionKind.NONE


NO_SELECTION = Selection()


class SelectionStateMachine:
    """Flat machine: none, route(index) or report(id); selecting one kind clears the other."""

    def __init__(self, initial: Selection | None = None) -> None:
        self.current = initial or NO_SELECTION

    def tap_destination(self, index: int) -> Selection:
        if self.current.kind is SelectionKind.ROUTE and self.current.route_index == index:
            self.current = NO_SELECTION
        else:
            self.current = Selection.route(index)
        return self.current

    def tap_report(self, report_id: str) -> Selection:
        if self.current.kind is SelectionKind.REPORT and self.current.report_id == report_id:
            self.current = NO_SELECTION
        else:
            self.current = Selection.report(report_id)
        return self.current

    def tap_background(self) -> Selection:
        self.current = NO_SELECTION
        return self.current

    def close(self) -> Selection:
        self.current = NO_SELECTION
        return self.current

    def handle(self, event: TapEvent) -> Selection:
        match event.kind:
            case TapKind.DESTINATION:
                if event.route_index is None:
                    raise ValueError("Destination tap requires a route_index")
                return self.tap_destination(event.route_index)
            case TapKind.REPORT:
                if event.report_id is None:
                    raise ValueError("Report tap requires a report_id")
                return self.tap_report(event.report_id)
            case TapKind.BACKGROUND:
                return self.tap_background()
            case TapKind.CLOSE:
                return self.close()
            case _:
                raise ValueError(f"Unknown tap event '{event.kind}'.")
