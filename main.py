"""Development entry point: `python main.py` serves the API with uvicorn."""

import uvicorn

from ticketdesk import config
from ticketdesk.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=config.HOST, port=config.PORT)
