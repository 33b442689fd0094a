import logging

import uvicorn
from kondate.api.api_run import app
from kondate.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL
from kondate.utilities.network import startup_urls


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    local_url, lan_url = startup_urls(APP_PORT)
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Uvicorn running on {local_url} (Press CTRL+C to quit)")
    # Other devices open a shared plan through the LAN address
    if lan_url:
        print(f"Accessible from other devices at: {lan_url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
