"""
Celery application configuration
"""

from celery import Celery
from celery.schedules import crontab
from kombu import Exchange, Queue

from lajme.core.config import settings
from lajme.domains.articles.ranking import Provider

celery_app = Celery(
    "lajme",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "lajme.tasks.crawling",
        "lajme.tasks.maintenance",
    ],
)

celery_app.conf.task_queues = (
    Queue("celery", Exchange("celery"), routing_key="celery"),
    Queue("crawling", Exchange("crawling"), routing_key="crawling"),
)
celery_app.conf.task_default_queue = "celery"
celery_app.conf.task_routes = {
    "lajme.tasks.crawling.*": {"queue": "crawling"},
}

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutes
    task_soft_time_limit=25 * 60,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
    worker_hijack_root_logger=False,
    broker_connection_timeout=5,
    broker_connection_retry=True,
    broker_connection_retry_on_startup=True,
    broker_connection_max_retries=3,
    broker_transport_options={
        "visibility_timeout": 3600,
        "socket_connect_timeout": 5,
        "socket_timeout": 5,
        "health_check_interval": 30,
    },
)

# Hour offset within each 4 hour cycle, so providers are not hit together
CRAWL_HOUR_OFFSETS = {
    Provider.GAZETA_EXPRESS: 0,
    Provider.GAZETA_BLIC: 1,
    Provider.TELEGRAFI: 2,
    Provider.INSAJDERI: 3,
    Provider.INDEKSONLINE: 4,
    Provider.BOTASOT: 5,
}


def _crawl_hours(offset: int) -> str:
    return ",".join(str(hour) for hour in sorted((offset + step) % 24 for step in range(0, 24, 4)))


def build_beat_schedule() -> dict:
    schedule = {}
    for provider, offset in CRAWL_HOUR_OFFSETS.items():
        schedule[f"crawl-{provider.value}"] = {
            "task": "lajme.tasks.crawling.crawl_provider",
            "schedule": crontab(minute=0, hour=_crawl_hours(offset)),
            "args": (provider.value,),
        }
    schedule["cleanup-old-articles"] = {
        "task": "lajme.tasks.maintenance.cleanup_old_articles",
        "schedule": crontab(minute=0, hour=0, day_of_week="sun"),
    }
    return schedule


celery_app.conf.beat_schedule = build_beat_schedule()
