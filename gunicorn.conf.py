"""
Gunicorn Configuration for Production

Run with: gunicorn main:app -c gunicorn.conf.py

QUOTAS AND WORKERS:
Without REDIS_URL every worker keeps its own in-memory quota windows, so
the effective AI/vote/flag ceilings are multiplied by the worker count.
Set REDIS_URL whenever GUNICORN_WORKERS > 1.
"""

import multiprocessing
import os

# =============================================================================
# Server Socket
# =============================================================================

bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# =============================================================================
# Worker Processes
# =============================================================================

workers = int(os.getenv("GUNICORN_WORKERS", min(2 * multiprocessing.cpu_count() + 1, 4)))

# Use Uvicorn worker for async support
worker_class = "uvicorn.workers.UvicornWorker"

# Word analysis calls are bounded by AI_TIMEOUT_SECONDS (30s by default)
timeout = 60
graceful_timeout = 30
keepalive = 5

# Max requests per worker before restart
max_requests = 1000
max_requests_jitter = 100

# =============================================================================
# Logging
# =============================================================================

accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = os.getenv("LOG_LEVEL", "info")

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# =============================================================================
# Process Naming
# =============================================================================

proc_name = "dexai-api"

# =============================================================================
# Hooks
# =============================================================================

def on_starting(server):
    """Called just before the master process is initialized."""
    if workers > 1 and not os.getenv("REDIS_URL"):
        server.log.warning("REDIS_URL not set: quotas are enforced per worker")
