from __future__ import annotations

import structlog
from django.conf import settings
from django.core.management.base import BaseCommand

from config.celery import app

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    help = "Consume the products commands from the message broker (variant A)."

    def add_arguments(self, parser):
        parser.add_argument("--concurrency", type=int, default=None)
        parser.add_argument("--loglevel", default="INFO")

    def handle(self, *args, **options):
        envs = settings.SERVICE_ENVS
        argv = [
            "worker",
            f"--loglevel={options['loglevel']}",
            f"--queues={settings.CELERY_TASK_DEFAULT_QUEUE}",
        ]
        if options["concurrency"]:
            argv.append(f"--concurrency={options['concurrency']}")

        logger.info(
            "listener.started",
            transport="broker",
            servers=", ".join(s.lower() for s in envs.broker_servers),
        )
        self.stdout.write(
            self.style.SUCCESS(
                "Products MicroService connected to broker on: "
                + ", ".join(s.lower() for s in envs.broker_servers)
            )
        )
        app.worker_main(argv=argv)
