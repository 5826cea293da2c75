"""
Serving — FastAPI application for the query and ingestion pipelines.

``POST /query`` answers a question, ``POST /ingest`` re-runs ingestion
over the configured document store.
"""
