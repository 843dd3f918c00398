"""Services package initialization"""
from .metrics import PageSizeMetrics
from .monitor import Monitor
from .sites import SiteListError, load_sites, parse_sites

__all__ = ["PageSizeMetrics", "Monitor", "SiteListError", "load_sites", "parse_sites"]
