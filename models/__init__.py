# This file makes the models directory a Python package 
from .journey_record import JourneyRecord, RecordType
from .guided_session import GuidedSession, GuidedSessionMessage, MessageRole, SessionScope
from .key_value import KeyValueEntry

__all__ = [
    'JourneyRecord',
    'RecordType',
    'GuidedSession',
    'GuidedSessionMessage',
    'MessageRole',
    'SessionScope',
    'KeyValueEntry',
]
