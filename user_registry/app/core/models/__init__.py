"""Core models."""

from .page import Page, check_page_request, slice_bounds

__all__ = ["Page", "check_page_request", "slice_bounds"]
