#!/usr/bin/env python3
"""
Run script for the ground operations backend
"""
import uvicorn

from groundops.config.settings import settings
from groundops.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
