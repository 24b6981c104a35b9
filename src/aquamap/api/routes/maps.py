"""Map rendering endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.map import (
    FitRequest,
    FitResponse,
    RenderRequest,
    RenderResponse,
    SelectionModel,
    SelectRequest,
)
from ...services.export import render_result_to_geojson
from ...services.rendering.service import (
    apply_selection_event,
    build_controller,
    fit_viewport,
    render_map,
)

router = APIRouter(prefix="/map", tags=["map"])


@router.post("/render", response_model=RenderResponse, status_code=status.HTTP_200_OK)
def render(payload: RenderRequest) -> RenderResponse:
    try:
        return render_map(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error rendering map: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to render map: {str(exc)}"
        ) from exc


@router.post("/select", response_model=SelectionModel, status_code=status.HTTP_200_OK)
def select(payload: SelectRequest) -> SelectionModel:
    """Apply one tap event to the current selection."""
    try:
        return apply_selection_event(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error applying selection event: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to apply selection event: {str(exc)}"
        ) from exc


@router.post("/fit", response_model=FitResponse, status_code=status.HTTP_200_OK)
def fit(payload: FitRequest) -> FitResponse:
    try:
        return fit_viewport(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error fitting viewport: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fit viewport: {str(exc)}"
        ) from exc


@router.post("/export", status_code=status.HTTP_200_OK)
def export_geojson(payload: RenderRequest) -> dict:
    """Render the map and return it as a GeoJSON FeatureCollection."""
    try:
        controller, _ = build_controller(payload)
        return render_result_to_geojson(controller.render())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error exporting map: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export map: {str(exc)}"
        ) from exc
