"""HTTP surface: FastAPI app, middleware and routers."""
