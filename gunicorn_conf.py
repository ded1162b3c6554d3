import multiprocessing
import os

CPU_COUNT = multiprocessing.cpu_count()

# os nonces ficam em TEMP_FOLDER, compartilhado entre os workers
workers = int(os.getenv("GUNICORN_WORKERS", max(1, CPU_COUNT)))

threads = int(os.getenv("GUNICORN_THREADS", 2))

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8005")

# as chamadas ao REST PKI usam REST_PKI_TIMEOUT; o worker precisa esperar mais que isso
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 2))

wsgi_app = "run:app"

accesslog = "-"   # stdout
errorlog = "-"    # stderr
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
