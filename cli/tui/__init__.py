"""
cli/tui - 대화형 터미널 내비게이터

Usage:
    from cli.tui import NavigatorApp, Runtime, StartupPath

    app = NavigatorApp(app_ctx, registry, config, StartupPath("ec2"))
    Runtime(app, console).run()
"""

from .app import AppState, NavigatorApp, StartupPath
from .runtime import Runtime

__all__ = ["AppState", "NavigatorApp", "Runtime", "StartupPath"]
