# gunicorn.conf.py
import os
import logging
import sys

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Get PORT from environment or use default
port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

wsgi_app = "app:create_app()"

# The journey store lives in process memory and must have exactly one writer
workers = 1
threads = 1
worker_class = "sync"

# Log configuration on startup
def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} worker on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")

# Upstream completions can be slow
timeout = 90
keepalive = 30

# Process naming
proc_name = "journey_backend"
default_proc_name = "journey_backend"

# Graceful server restart
graceful_timeout = 30  # Give workers 30 seconds to finish serving requests
