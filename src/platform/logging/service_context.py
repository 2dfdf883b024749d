"""
Service context for log records.

Every gate device runs its own validator process; tagging records with the
device identity makes logs shipped from many gates distinguishable.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'gate-validator')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    device = os.getenv('DEVICE_NAME') or socket.gethostname() or 'unknown'
    return f'{service_name}@{deploy_env}:{device}:{os.getpid()}'
