"""
Gunicorn configuration
Usage: gunicorn -c gunicorn_config.py wsgi:application
"""
import multiprocessing
import os

log_dir = os.getenv('JPA_TO_ER_LOG_DIR', 'logs')
os.makedirs(log_dir, exist_ok=True)

# Server socket
bind = os.getenv('JPA_TO_ER_BIND', '0.0.0.0:5001')
backlog = 2048

# Worker processes
workers = int(os.getenv('JPA_TO_ER_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_connections = 1000
timeout = 30
keepalive = 2

# Restart workers periodically
max_requests = 1000
max_requests_jitter = 50
preload_app = True

# Logging
accesslog = os.path.join(log_dir, "gunicorn_access.log")
errorlog = os.path.join(log_dir, "gunicorn_error.log")
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "jpa_to_er_app"

daemon = False
pidfile = os.path.join(log_dir, "gunicorn.pid")
tmp_upload_dir = None
