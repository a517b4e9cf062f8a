#!/usr/bin/env python3
"""
Quick runner for LegalPro Lite
==============================

Usage:
    python -m legalpro_lite.run
"""

import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8000"))
    print("Starting LegalPro API...")
    print(f"API docs: http://localhost:{port}/docs")
    print(f"Health:   http://localhost:{port}/health")
    print()

    uvicorn.run(
        "legalpro_lite.api:app",
        host="0.0.0.0",
        port=port,
        reload=os.environ.get("ENVIRONMENT", "development") != "production",
    )
