from prometheus_client import Counter, Histogram

# HTTP
HTTP_REQUEST_DURATION = Histogram(
    "nc_http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ["method", "path", "status_code"],
)
HTTP_REQUESTS_TOTAL = Counter(
    "nc_http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

# Compiler
COMPILATIONS_TOTAL = Counter(
    "nc_compilations_total",
    "Total number of project compilations",
    ["result"],
)
COMPILE_DURATION = Histogram(
    "nc_compile_duration_seconds",
    "Duration of successful project compilations in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)
MODULES_EMITTED_TOTAL = Counter(
    "nc_modules_emitted_total",
    "Total number of layer statements emitted",
)

# Training
TRAIN_RUNS_TOTAL = Counter(
    "nc_train_runs_total",
    "Total number of training script runs",
    ["status"],
)
TRAIN_RUN_DURATION = Histogram(
    "nc_train_run_duration_seconds",
    "Duration of training script runs in seconds",
    buckets=(1, 5, 15, 60, 300, 900, 3600),
)
