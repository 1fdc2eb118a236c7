"""
Upstream Binder CLI - pod/service binding tools

Commands:
- upstream-binder run - Start the operator
- upstream-binder events - Show how recent pod events would be routed
- upstream-binder resolve - Show the service a pod binds to
- upstream-binder ready - Wait for a pod to become ready
"""

from binder import __version__

__all__ = ["__version__"]
