"""Route Modules — one file per resource: health, tools, calculations, admin.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes hold no business logic (delegate to core/ and services/)
"""
