"""
Main entry point for the Deal Room API.

Usage:
    python run_fastapi.py

Or with uvicorn directly:
    uvicorn dealroom.fastapi_app:create_fastapi_app --factory --host 0.0.0.0 --port 8000
"""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

import uvicorn

if __name__ == "__main__":
    env = os.getenv("DEALROOM_ENV", "development")
    debug = env == "development"
    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")

    print(f"Starting Deal Room API in {env} mode...")
    print(f"Server running on http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")

    uvicorn.run(
        "dealroom.fastapi_app:create_fastapi_app",
        factory=True,
        host=host,
        port=port,
        reload=debug,
        log_level="info" if debug else "warning",
    )
