"""Alert dispatch — concurrent fan-out, retry, background handoff."""

from safealert.dispatch.dispatcher import AlertDispatcher
from safealert.dispatch.exceptions import DispatchError, NoContactsError
from safealert.dispatch.factory import create_alert_pipeline
from safealert.dispatch.messages import build_sms_body, build_voice_message
from safealert.dispatch.pipeline import AlertPipeline
from safealert.dispatch.retry import RetryExhaustedError, RetryPolicy

__all__ = [
    "AlertDispatcher",
    "AlertPipeline",
    "DispatchError",
    "NoContactsError",
    "RetryExhaustedError",
    "RetryPolicy",
    "build_sms_body",
    "build_voice_message",
    "create_alert_pipeline",
]
