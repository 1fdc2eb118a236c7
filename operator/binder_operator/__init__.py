"""
Pod upstream binder operator.

Watches pod lifecycle events and binds/unbinds each pod to the service
that fronts it.
"""
