"""
Serving Context

Responsibilities:
- Exposes compile and template store operations over HTTP
- Validates and defaults request payloads before they reach the pipeline
- Prepares the scratch directory and logging once per process

Owns: HTTP models, the FastAPI application
Never: Runs external tools directly (see rendering context)
"""
