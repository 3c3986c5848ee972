from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import (
    OTLPLogExporter,
)
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry._logs import set_logger_provider
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from trafficwatch.config import settings
from trafficwatch.models.session import engine
import logging

logger = logging.getLogger(__name__)


def setup_logging():
    """Ship application logs to the OTLP collector and trace SQLAlchemy queries."""
    try:
        SQLAlchemyInstrumentor().instrument(engine=engine)
        resource = Resource(attributes={SERVICE_NAME: settings.SERVICE_NAME})

        log_exporter = OTLPLogExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=settings.OTEL_COLLECTOR_ALLOW_INSECURE.lower() == "true",
        )
        log_provider = LoggerProvider(resource=resource)
        set_logger_provider(log_provider)
        log_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))

        log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        handler = LoggingHandler(level=log_level, logger_provider=log_provider)
        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.addHandler(handler)
    except Exception as e:
        # the service keeps running with console logging only
        logger.error(f"OpenTelemetry log export not configured: {e}")
