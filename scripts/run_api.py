# path: scripts/run_api.py
import os
import sys
import traceback

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from beam_sfd.services.logging_setup import setup_logging
logger = setup_logging()

def _excepthook(exctype, value, tb):
    msg = "".join(traceback.format_exception(exctype, value, tb))
    logger.error("Excepción no capturada:\n%s", msg)
    sys.__excepthook__(exctype, value, tb)

sys.excepthook = _excepthook

import uvicorn

from beam_sfd.api.app import app

if __name__ == "__main__":
    host = os.environ.get("BEAM_SFD_HOST", "127.0.0.1")
    port = int(os.environ.get("BEAM_SFD_PORT", "8000"))
    logger.info("API en http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)
