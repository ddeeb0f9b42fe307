"""
Domain layer - contracts and value types.

This package contains:
- Models: entities, platform and domain keys, query and result types
- Services: the platform adapter contract
- Exceptions: the composition layer error taxonomy
"""
