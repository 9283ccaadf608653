"""Expresso - middleware chains and content-negotiated responses for Starlette."""

from expresso.app import App, not_found
from expresso.chain import Chain, ResolvedChain
from expresso.config import Settings, configure_logging, get_settings
from expresso.context import RequestContext
from expresso.dispatcher import chain_endpoint, run_chain
from expresso.exceptions import (
    ExpressoException,
    MiddlewareError,
    PayloadError,
    RequestReadError,
    ResponseCommitted,
    UnsupportedPayload,
)
from expresso.hooks import AfterChain, AfterMiddleware, BeforeChain, ChainHook
from expresso.logger import LogEntry, LogLevel, RequestLogger
from expresso.middlewares import APIKeyAuthentication, Cors, cors
from expresso.negotiation import negotiate
from expresso.payloads import (
    HTML,
    JSON,
    XML,
    YAML,
    File,
    Formatted,
    Payload,
    Template,
    Text,
    error_formats,
)
from expresso.request import Method, Params, RequestView, build_request_view
from expresso.response import ResponseWriter
from expresso.trace import ChainTrace, TraceEntry

__all__ = [
    "HTML",
    "JSON",
    "XML",
    "YAML",
    "APIKeyAuthentication",
    "AfterChain",
    "AfterMiddleware",
    "App",
    "BeforeChain",
    "Chain",
    "ChainHook",
    "ChainTrace",
    "Cors",
    "ExpressoException",
    "File",
    "Formatted",
    "LogEntry",
    "LogLevel",
    "Method",
    "MiddlewareError",
    "Params",
    "Payload",
    "PayloadError",
    "RequestContext",
    "RequestLogger",
    "RequestReadError",
    "RequestView",
    "ResolvedChain",
    "ResponseCommitted",
    "ResponseWriter",
    "Settings",
    "Template",
    "Text",
    "TraceEntry",
    "UnsupportedPayload",
    "build_request_view",
    "chain_endpoint",
    "configure_logging",
    "cors",
    "error_formats",
    "get_settings",
    "negotiate",
    "not_found",
    "run_chain",
]
