"""
Prefect flows for the data pipeline.

Flows:
- backfill: Fetch daily weather for every geolocated block into the cache

Usage (local):
    python -m vineyard_diary.flows.backfill

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m vineyard_diary.flows.backfill
"""
