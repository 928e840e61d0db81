#!/usr/bin/env python3
"""
Run script for the StudyCard speech backend
"""
import uvicorn

from studycard.config.settings import settings
from studycard.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
