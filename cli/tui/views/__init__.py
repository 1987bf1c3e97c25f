"""
cli/tui/views - 화면 구현

ServiceBrowser, ResourceBrowser, DetailView, DiffView, LogView,
Dashboard, RegionSelector/ProfileSelector, HelpView, ConfirmView, ActionMenu
"""

from .action_menu import ActionMenu
from .confirm import ConfirmView
from .dashboard import Dashboard
from .detail_view import DetailView
from .diff_view import DiffView
from .help_view import HelpView
from .log_view import LogView
from .resource_browser import ResourceBrowser
from .selector import MultiSelector, ProfileSelector, RegionSelector
from .service_browser import ServiceBrowser
from .warnings import render_warnings

__all__ = [
    "ActionMenu",
    "ConfirmView",
    "Dashboard",
    "DetailView",
    "DiffView",
    "HelpView",
    "LogView",
    "MultiSelector",
    "ProfileSelector",
    "RegionSelector",
    "ResourceBrowser",
    "ServiceBrowser",
    "render_warnings",
]
