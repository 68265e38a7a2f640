from .base import SendResult
from .email import EmailChannel, to_safe_email_address
from .sms import SmsChannel

__all__ = ["EmailChannel", "SendResult", "SmsChannel", "to_safe_email_address"]
