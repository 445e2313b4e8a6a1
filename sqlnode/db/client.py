from __future__ import annotations

import logging
import os
import threading

import oracledb

from ..config import ClientMode, ConnectionConfig

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_initialized = False


def init_client(config: ConnectionConfig) -> bool:
    """
    Switch python-oracledb to thick mode, once per process.

    Thin mode needs no native client, so ``ClientMode.THIN`` is a no-op.
    ``oracledb.init_oracle_client`` may only succeed once per process; later
    calls return without touching the driver. A failed call is logged and
    re-raised and leaves the guard unset so it can be retried.

    Returns:
        True if this call initialised the client, False otherwise
    """
    global _initialized

    if config.client_mode == ClientMode.THIN:
        return False

    with _lock:
        if _initialized:
            return False

        kwargs = {}
        if config.client_mode == ClientMode.CUSTOM:
            kwargs["lib_dir"] = os.path.expanduser(config.client_lib_dir)

        try:
            oracledb.init_oracle_client(**kwargs)
        except Exception:
            logger.exception(
                "Oracle client initialisation failed (mode=%s, lib_dir=%s)",
                config.client_mode.value,
                kwargs.get("lib_dir"),
            )
            raise

        _initialized = True
        logger.info("Oracle client initialised in thick mode (mode=%s)", config.client_mode.value)
        return True


def client_initialized() -> bool:
    return _initialized
