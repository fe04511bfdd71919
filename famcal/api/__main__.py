# pragma: no cover

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from famcal.api.settings import ServerSettings, verify_env_vars
from famcal.logging import setup as setup_logging

setup_logging()


def run_server() -> None:
    from famcal.api.main import app

    settings = ServerSettings()

    # include timestamps in uvicorn logs
    LOGGING_CONFIG["formatters"]["default"]["fmt"] = "%(asctime)s %(levelprefix)s %(message)s"
    LOGGING_CONFIG["formatters"]["access"][
        "fmt"
    ] = '%(asctime)s %(levelprefix)s %(client_addr)s - "%(request_line)s" %(status_code)s'

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
    )


verify_env_vars()

run_server()
