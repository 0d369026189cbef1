"""
Development entry point.

Runs the API with uvicorn; use ``alembic upgrade head`` first when the
database is new.
"""

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("library_api:app", host="0.0.0.0", port=8000)
