from contentstack_management.runtime.pipeline.handler import PipelineHandler
from contentstack_management.runtime.pipeline.http_handler import HttpHandler
from contentstack_management.runtime.pipeline.retry import DefaultRetryPolicy, RetryHandler, RetryPolicy
from contentstack_management.runtime.pipeline.runtime_pipeline import ContentstackRuntimePipeline

__all__ = [
    "ContentstackRuntimePipeline",
    "DefaultRetryPolicy",
    "HttpHandler",
    "PipelineHandler",
    "RetryHandler",
    "RetryPolicy",
]
