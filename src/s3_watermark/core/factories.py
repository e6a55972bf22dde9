"""Factory classes for creating configured service instances."""

import functools
from typing import Any, Optional

import boto3

from .gateway import S3ObjectStoreGateway
from .models import WatermarkConfig
from .observability import StructuredLogger
from .protocols import LoggerProtocol, ObjectStoreGateway, S3ClientProtocol
from .services import ProcessingOrchestrator
from ..processors import create_batch_processor


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "s3-watermark", level: Optional[str] = None) -> LoggerProtocol:
        """Create a configured structured logger."""
        return StructuredLogger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class ProcessingPipelineFactory:
    """Factory for creating the complete processing pipeline."""

    @staticmethod
    def create_gateway(
        config: WatermarkConfig, s3_client: Optional[S3ClientProtocol] = None
    ) -> ObjectStoreGateway:
        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()
        return S3ObjectStoreGateway(s3_client, max_attempts=config.s3_max_attempts)

    @staticmethod
    def create_pipeline(
        config: WatermarkConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        gateway: Optional[ObjectStoreGateway] = None,
    ) -> ProcessingOrchestrator:
        """Create a fully configured processing pipeline."""
        if gateway is None:
            gateway = ProcessingPipelineFactory.create_gateway(config, s3_client)

        if logger is None:
            logger = LoggerFactory.create_logger("s3-watermark.pipeline")

        batch_processor_factory = functools.partial(
            _batch_processor_for, config.processor, config.max_workers
        )

        return ProcessingOrchestrator(
            gateway=gateway,
            batch_processor_factory=batch_processor_factory,
            logger=logger,
            max_watermark_height=config.max_watermark_height,
            watermark_padding=config.watermark_padding,
        )


def _batch_processor_for(name, max_workers, processing_service):
    return create_batch_processor(name, processing_service, max_workers=max_workers)
