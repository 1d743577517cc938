"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs and shared constants
    └── {feature}.py      # Fetch functions (one per concept)

Fetch functions return models from ``vineyard_diary.schemas`` so the cache and
the analytics never see raw API payloads.
"""
