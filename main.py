from __future__ import annotations

import uvicorn

from tickerboard.api.app import create_api_app
from tickerboard.core.config import settings

app = create_api_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
