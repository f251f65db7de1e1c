#!/usr/bin/env python3
"""
Simple script to run the Workload Planning API server.
"""

import logging

import uvicorn
from workload_planning.config import API_HOST, API_PORT, LOG_LEVEL

if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("Starting Workload Planning API...")
    print(f"API will be available at: http://localhost:{API_PORT}")
    print(f"Interactive docs at: http://localhost:{API_PORT}/docs")

    uvicorn.run(
        "workload_planning.api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,  # Auto-reload on code changes
        log_level=LOG_LEVEL
    )
