from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "checkout_admin_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "checkout_admin_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path", "status"],
)
REQUEST_ERRORS = Counter(
    "checkout_admin_http_request_errors_total",
    "Total HTTP 5xx responses",
    ["method", "path", "status"],
)
REPORT_FALLBACKS = Counter(
    "checkout_admin_report_fallbacks_total",
    "Listing responses served from synthetic rows",
    ["report"],
)
BILLING_CALLS = Counter(
    "checkout_admin_billing_calls_total",
    "Outbound billing API calls",
    ["method", "outcome"],
)
