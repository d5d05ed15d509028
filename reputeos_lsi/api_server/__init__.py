"""
API server package: FastAPI app and LSI routes.
"""
