# app/main.py
from __future__ import annotations

import os

# ✅ PRECISA vir antes de qualquer import de flask/sqlalchemy
if os.getenv("SOCKETIO_ASYNC_MODE", "eventlet").lower() == "eventlet":
    import eventlet

    eventlet.monkey_patch()

from app.bootstrap import create_app  # noqa: E402
from app.infrastructure.realtime.socketio_server import socketio  # noqa: E402

app = create_app()

if __name__ == "__main__":
    # OBS: em produção use gunicorn com worker eventlet,
    # este bloco é só para execução direta.
    socketio.run(app, host="0.0.0.0", port=5000, debug=True)
