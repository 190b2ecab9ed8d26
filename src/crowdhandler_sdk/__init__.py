"""Client SDK for the CrowdHandler virtual waiting room."""

from loguru import logger

from crowdhandler_sdk.agent_lang import (
    AgentLanguage,
    AgentLanguageProvider,
    CallableAgentLanguageProvider,
    StaticAgentLanguageProvider,
)
from crowdhandler_sdk.diagnostics import DiagnosticChannel, DiagnosticEvent, DiagnosticKind
from crowdhandler_sdk.errors import ApiError, CrowdHandlerError
from crowdhandler_sdk.gate import GateCheck, QueueGate
from crowdhandler_sdk.logging_config import disable_logging, enable_logging
from crowdhandler_sdk.result import QueueDecision
from crowdhandler_sdk.session import DEFAULT_BASE_URL, RequestSession
from crowdhandler_sdk.waiting_room import WaitingRoomBridge, waiting_room_url

__all__ = [
    "AgentLanguage",
    "AgentLanguageProvider",
    "ApiError",
    "CallableAgentLanguageProvider",
    "CrowdHandlerError",
    "DEFAULT_BASE_URL",
    "DiagnosticChannel",
    "DiagnosticEvent",
    "DiagnosticKind",
    "GateCheck",
    "QueueDecision",
    "QueueGate",
    "RequestSession",
    "StaticAgentLanguageProvider",
    "WaitingRoomBridge",
    "disable_logging",
    "enable_logging",
    "waiting_room_url",
]

# Silent until the host opts in with enable_logging()
logger.disable(__name__)
