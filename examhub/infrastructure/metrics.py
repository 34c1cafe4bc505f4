from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Метрики для HTTP запросов
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Метрики для кэша профилей
cache_hits_total = Counter('profile_cache_hits_total', 'Total profile cache hits')
cache_misses_total = Counter('profile_cache_misses_total', 'Total profile cache misses')

# Метрики для БД
db_queries_total = Counter('db_queries_total', 'Total database queries')

# Ошибки, скрытые за 500
internal_errors_total = Counter(
    'internal_errors_total',
    'Unexpected failures downgraded to internal errors',
    ['operation']
)

def metrics_endpoint():
    """Endpoint для Prometheus метрик"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
