"""
Test suite for the pod upstream binder.

Focus areas:
- Event parsing and validation
- Service resolution and readiness polling against a fake cluster
- Dispatch and routing, end to end, in simulated time
"""
