"""Gunicorn configuration for production deployment."""

# Server socket
bind = '0.0.0.0:8000'

# Submission guards are per process, so concurrent duplicate submits are
# only rejected within one worker. SQLite also prefers few writers.
workers = 2
threads = 4
worker_class = 'gthread'

# Notification POSTs are bounded by NOTIFICATION_TIMEOUT
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = '/app/logs/gunicorn-access.log'
errorlog = '/app/logs/gunicorn-error.log'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'creaparty'

# Preload app for faster worker startups
preload_app = True

# Worker recycling
max_requests = 1000
max_requests_jitter = 50

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190
